"""Cypher query templates for the decision store and vector index.

Explicit edges use a single ``RELATES`` relationship type with the
relationship name as a property: the relationship set is open-ended and
Neo4j Community Edition cannot create dynamic relationship types without
APOC.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

CONSTRAINT_DECISION_PK = (
    "CREATE CONSTRAINT decision_pk IF NOT EXISTS FOR (d:Decision) REQUIRE d.id IS UNIQUE"
)

INDEX_DECISION_CREATED_AT = (
    "CREATE INDEX decision_created_at IF NOT EXISTS FOR (d:Decision) ON (d.created_at)"
)

ALL_CONSTRAINTS = [CONSTRAINT_DECISION_PK, INDEX_DECISION_CREATED_AT]


def create_vector_index(index_name: str, dimensions: int) -> str:
    """DDL for the cosine vector index over ``Decision.embedding``.

    Index names and OPTIONS cannot be parameterized, so they are rendered
    into the statement.
    """
    return (
        f"CREATE VECTOR INDEX `{index_name}` IF NOT EXISTS "
        "FOR (d:Decision) ON (d.embedding) "
        "OPTIONS {indexConfig: {"
        f"`vector.dimensions`: {int(dimensions)}, "
        "`vector.similarity_function`: 'cosine'"
        "}}"
    )


# ---------------------------------------------------------------------------
# Decision reads
# ---------------------------------------------------------------------------

_DECISION_FIELDS = """
d.id AS id,
d.topic AS topic,
d.decision AS decision,
d.reasoning AS reasoning,
d.outcome AS outcome,
d.confidence AS confidence,
d.created_at AS created_at
""".strip()

LIST_DECISIONS = f"""
MATCH (d:Decision)
RETURN {_DECISION_FIELDS}
ORDER BY d.created_at DESC
""".strip()

GET_DECISION = f"""
MATCH (d:Decision {{id: $id}})
RETURN {_DECISION_FIELDS}
""".strip()

LIST_EDGES = """
MATCH (a:Decision)-[r:RELATES]->(b:Decision)
RETURN a.id AS from_id,
       b.id AS to_id,
       r.relationship AS relationship,
       r.reason AS reason
ORDER BY r.created_at DESC
""".strip()

# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

MERGE_DECISION = """
MERGE (d:Decision {id: $id})
SET d.topic = $topic,
    d.decision = $decision,
    d.reasoning = $reasoning,
    d.outcome = $outcome,
    d.confidence = $confidence,
    d.created_at = $created_at
""".strip()

MERGE_EDGE = """
MATCH (a:Decision {id: $from_id})
MATCH (b:Decision {id: $to_id})
MERGE (a)-[r:RELATES {relationship: $relationship}]->(b)
ON CREATE SET r.created_at = $created_at
SET r.reason = $reason
""".strip()

SET_OUTCOME = """
MATCH (d:Decision {id: $id})
SET d.outcome = $outcome,
    d.failure_reason = $reason,
    d.updated_at = $updated_at
RETURN d.id AS id
""".strip()

# ---------------------------------------------------------------------------
# Vector index
# ---------------------------------------------------------------------------

SET_EMBEDDING = """
MATCH (d:Decision {id: $id})
SET d.embedding = $vector
RETURN d.id AS id
""".strip()

QUERY_NEAREST = """
CALL db.index.vector.queryNodes($index_name, $k, $vector)
YIELD node, score
WHERE score >= $min_score
RETURN node.id AS id, score
ORDER BY score DESC
""".strip()
