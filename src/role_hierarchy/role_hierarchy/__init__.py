"""Role Hierarchy package.

Role-hierarchy workflow graph for the Goyalsons management system: an
editable DAG of roles and supervision edges, with a thin Flask controller
layer and service/repository layers for persistence.
"""
