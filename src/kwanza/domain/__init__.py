"""Domain layer for kwanza application.

Services live in their own modules (``kwanza.domain.pgc``,
``kwanza.domain.payroll``, ...) and are imported from there; this package
stays import-free so the database layer can load entities without cycles.
"""
