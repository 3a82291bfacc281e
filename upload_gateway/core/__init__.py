"""
Core upload logic.

This package is framework-agnostic: it doesn't import FastAPI, boto3,
or any infrastructure concerns, so the upload rules can be tested in
isolation.
"""
