"""Domain layer for cleanops application.

Services are imported from their modules (e.g. ``cleanops.domain.job``);
this package stays import-light so the database layer can import entities
without pulling the services in.
"""
