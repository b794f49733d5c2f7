"""Domain Interfaces (Ports):

Defines the contracts (Abstract Base Classes) that infrastructure components
must implement: the HTTP transport, the credential exchange and the user
interface. The client depends on these interfaces, not on concrete
implementations.
"""
