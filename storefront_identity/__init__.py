"""Identity service for the storefront: accounts, tokens and the shared authorization contract."""
