"""SecretShare HTTP API process package."""
