"""Configuration, persistence, security and event plumbing shared by the app."""
