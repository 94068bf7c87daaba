"""Commands shipped with switchboard itself."""
