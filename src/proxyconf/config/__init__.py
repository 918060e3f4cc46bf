"""Tool configuration: settings, discovery, and logging setup."""
