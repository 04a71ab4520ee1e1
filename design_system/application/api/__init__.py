"""HTTP surface: routes, response models, middleware and dependencies."""
