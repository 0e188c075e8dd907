import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("CREDENTIAL_BACKEND", "memory")
