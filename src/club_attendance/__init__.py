"""Club attendance package.

Feature modules (settings, roster, attendance) each keep a model, a repository
protocol with its MySQL implementation, a service layer and a thin Flask
controller.
"""
