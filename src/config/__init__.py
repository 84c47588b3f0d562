"""Settings, credentials and host capability catalog."""
