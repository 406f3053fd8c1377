"""Canteen attendance package.

Polls the biometric access-control server, turns its punch logs into canteen
entries and exposes them for approval. Organized by feature modules with a thin
Flask controller layer over service/repository layers.
"""
