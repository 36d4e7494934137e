"""Foundation layer: error records and configuration."""
