"""
Application Layer for the Rituals API.

Part of RIT-22: Define repository interfaces (ports)

This package contains:
- ports/: Abstract repository interfaces (what the domain needs)
- use_cases/: Workflows coordinating domain services and ports
- exceptions: Errors shared by the application and infrastructure layers
"""
