"""Record Store Access Layer for Journey Service.

This package provides the record store contract, its postgres and supabase
implementations, the timeout guard and the dependency injection for the
journey service.
"""
