"""Pure domain code: models, value variant, encoders and ports."""
