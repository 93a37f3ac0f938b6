"""Services for git-batch."""
