"""Configuration for tempograph: feature flags."""
