"""Domain services: pure scoring and reward policy."""
