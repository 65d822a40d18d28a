"""service2: a demonstration service that chains calls to service3 and service4."""
