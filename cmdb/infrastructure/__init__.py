"""
Infrastructure Package
======================

Cross-module technical infrastructure. Currently the database engine,
sessions and repository helpers.
"""
