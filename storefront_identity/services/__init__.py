"""Identity services: credential store, token issuer and session flows."""
