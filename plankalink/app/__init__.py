"""
Application wiring: settings, client and tool registry singletons.
"""
