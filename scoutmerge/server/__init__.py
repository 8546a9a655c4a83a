"""ScoutMerge HTTP server (FastAPI app + lifespan).

Entry point:
    uvicorn scoutmerge.server.main:app --host 0.0.0.0 --port 8000
"""
