"""
GraphQL schema for the Air Quality Service.
Defines the complete GraphQL schema using Strawberry.
"""

from typing import Optional

import strawberry
from strawberry.fastapi import GraphQLRouter

from ...core.services.monitor_service import AirQualityMonitor
from ..notifiers.log_notifier import LogNotifier
from .resolvers import Query, Mutation


def create_graphql_schema() -> strawberry.Schema:
    """Create the GraphQL schema."""
    return strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router(
    monitor: AirQualityMonitor,
    notifier: Optional[LogNotifier] = None,
    playground_enabled: bool = False
) -> GraphQLRouter:
    """
    Create GraphQL router with FastAPI integration.

    Args:
        monitor: The air quality monitor handed to resolvers through the context
        notifier: Notifier holding active alerts (optional)
        playground_enabled: Whether to serve the GraphiQL IDE

    Returns:
        GraphQL router for FastAPI integration
    """
    schema = create_graphql_schema()

    async def get_context():
        return {"monitor": monitor, "notifier": notifier}

    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if playground_enabled else None
    )
