"""HTTP routers for the Wolf tracker server."""
