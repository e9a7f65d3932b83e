"""Application package for the TestTrack practice-test backend.

This package exposes the scoring core together with the service,
repository and model modules used by the FastAPI application. The
scoring rules live in `testtrack.scoring`; everything else is storage
and HTTP plumbing around them.
"""
