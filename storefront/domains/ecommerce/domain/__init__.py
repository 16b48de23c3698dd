"""
E-commerce Domain Layer

Entities, value objects and domain services of checkout.
"""
