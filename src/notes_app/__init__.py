"""Notes application: Lambda handlers and a Cognito-authenticated AWS client."""

__version__ = "0.1.0"
