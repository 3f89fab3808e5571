"""HTTP interface for the deployment pipeline."""
