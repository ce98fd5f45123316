"""
Product catalog service: CRUD over products with request validation.
"""
