"""HTTP trigger layer (FastAPI) for the scheduled sweeps and admin actions."""
