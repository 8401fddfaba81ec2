"""HRMS portal package.

Role-scoped dashboards over a remote HRMS REST API. The package is organized
by concern (api, session, routing, polling) with a thin Flask controller
layer on top; every business rule lives on the backend.
"""
