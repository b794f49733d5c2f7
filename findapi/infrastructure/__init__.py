"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the client to the outside world (HTTP, configuration files,
the console) by implementing the interfaces defined in the domain layer.
Also includes the token cache and the rate-limit dispatcher.
"""
