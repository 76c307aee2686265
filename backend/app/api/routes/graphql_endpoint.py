"""GraphQL Endpoint — strawberry router serving the schema at /graphql.

Invariants:
    - Every operation gets the request-scoped AsyncSession as context["db"]
    - The GraphiQL IDE is served only when explicitly enabled
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import GraphQLRouter

from app.infrastructure.database import get_db
from app.schemas.graphql_types import schema


async def get_context(db: AsyncSession = Depends(get_db)) -> dict:
    return {"db": db}


def build_graphql_router(graphiql: bool = False) -> GraphQLRouter:
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if graphiql else None,
    )
