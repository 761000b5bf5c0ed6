"""Transports executing queries against the content server."""

from .graphql import GraphQLRequest, GraphQLTransport, Transport, TransportResult

__all__ = ["GraphQLRequest", "GraphQLTransport", "Transport", "TransportResult"]
