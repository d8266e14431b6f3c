"""Tests for the Kuzu-backed schema graph store."""

import pytest

from schema_designer.graph import (
    Field,
    FieldType,
    Position,
    Relation,
    SchemaGraph,
    Table,
    TableOptions,
)


def _table(graph: SchemaGraph, name: str, x: float = 0.0) -> Table:
    table = Table(
        id=graph.make_table_id(),
        name=name,
        position=Position(x, 0.0),
        options=TableOptions(),
        created_at=123,
    )
    graph.add_table(table)
    return table


def _field(graph: SchemaGraph, table: Table, name: str) -> Field:
    field = Field(id=graph.make_field_id(), table_id=table.id, name=name)
    graph.add_field(field)
    return field


def test_table_roundtrip(graph):
    table = Table(
        id=graph.make_table_id(),
        name="User",
        position=Position(12.5, 40),
        options=TableOptions(soft_deletes=True),
        created_at=1_700_000_000_000,
    )
    graph.add_table(table)

    stored = graph.get_table(table.id)
    assert stored == Table(
        id=table.id,
        name="User",
        position=Position(12.5, 40.0),
        options=TableOptions(
            has_auto_id=True, remember_token=False, soft_deletes=True, timestamps=True
        ),
        created_at=1_700_000_000_000,
    )


def test_missing_entities_return_none(graph):
    assert graph.get_table("tbl_missing") is None
    assert graph.get_field("fld_missing") is None
    assert graph.get_relations_for_field("fld_missing") == []


def test_ids_are_prefixed_and_unique(graph):
    ids = {graph.make_table_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(i.startswith("tbl_") for i in ids)
    assert graph.make_field_id().startswith("fld_")
    assert graph.make_relation_id().startswith("rel_")


def test_collections_keep_creation_order(graph):
    names = ["Zeta", "Alpha", "Mid"]
    for i, name in enumerate(names):
        _table(graph, name, x=i)
    assert [t.name for t in graph.get_tables()] == names
    assert graph.get_positions() == [Position(0, 0), Position(1, 0), Position(2, 0)]


def test_fields_follow_has_field_edges(graph):
    user = _table(graph, "User")
    post = _table(graph, "Post")
    title = _field(graph, post, "title")
    body = _field(graph, post, "body")
    _field(graph, user, "email")

    assert graph.get_fields_for_table(post.id) == [title, body]
    assert [f.name for f in graph.get_fields_for_table(user.id)] == ["email"]
    assert title.type is FieldType.INTEGER


def test_updates_touch_single_property(graph):
    table = _table(graph, "User")
    field = _field(graph, table, "field")

    graph.set_table_name(table.id, "Account")
    graph.set_table_position(table.id, Position(5, 6))
    graph.set_table_option(table.id, "remember_token", True)
    graph.set_field_name(field.id, "email")
    graph.set_field_type(field.id, FieldType.STRING)

    stored = graph.get_table(table.id)
    assert stored.name == "Account"
    assert stored.position == Position(5, 6)
    assert stored.options == TableOptions(remember_token=True)
    assert graph.get_field(field.id) == Field(
        id=field.id, table_id=table.id, name="email", type=FieldType.STRING
    )


def test_unknown_option_is_rejected(graph):
    table = _table(graph, "User")
    with pytest.raises(KeyError):
        graph.set_table_option(table.id, "nullable", True)


def test_relation_queries(graph):
    user = _table(graph, "User")
    post = _table(graph, "Post")
    author = _field(graph, post, "user_id")
    relation = Relation(
        id=graph.make_relation_id(),
        field_id=author.id,
        from_table_id=post.id,
        to_table_id=user.id,
    )
    graph.add_relation(relation)

    assert graph.get_relations() == [relation]
    assert graph.get_relations_for_field(author.id) == [relation]
    assert graph.get_relations_to_table(user.id) == [relation]
    assert graph.get_relations_to_table(post.id) == []
    assert graph.get_relations_for_table(user.id) == [relation]
    assert graph.get_relations_for_table(post.id) == [relation]

    graph.delete_relation(relation.id)
    assert graph.get_relations() == []
    # Deleting again matches nothing
    graph.delete_relation(relation.id)


def test_delete_field_drops_its_edges(graph):
    user = _table(graph, "User")
    post = _table(graph, "Post")
    author = _field(graph, post, "user_id")
    graph.add_relation(
        Relation(graph.make_relation_id(), author.id, post.id, user.id)
    )

    graph.delete_field(author.id)

    assert graph.get_field(author.id) is None
    assert graph.get_fields_for_table(post.id) == []
    assert graph.get_relations() == []


def test_statistics(graph):
    user = _table(graph, "User")
    post = _table(graph, "Post")
    author = _field(graph, post, "user_id")
    _field(graph, post, "title")
    graph.add_relation(
        Relation(graph.make_relation_id(), author.id, post.id, user.id)
    )

    assert graph.get_statistics() == {
        "total_tables": 2,
        "total_fields": 2,
        "total_relations": 1,
    }


def test_transaction_commits(graph):
    with graph.transaction():
        _table(graph, "User")
        _table(graph, "Post")
    assert [t.name for t in graph.get_tables()] == ["User", "Post"]


def test_transaction_rolls_back_on_error(graph):
    _table(graph, "Kept")

    with pytest.raises(RuntimeError, match="boom"):
        with graph.transaction():
            table = _table(graph, "Dropped")
            _field(graph, table, "field")
            with graph.transaction():
                graph.set_table_name(table.id, "Nested")
            raise RuntimeError("boom")

    assert [t.name for t in graph.get_tables()] == ["Kept"]
    assert graph.get_fields() == []


def test_snapshot_and_clear_all(graph):
    table = _table(graph, "User")
    _field(graph, table, "email")

    snapshot = graph.snapshot()
    assert [t.name for t in snapshot.tables] == ["User"]
    assert [f.name for f in snapshot.fields] == ["email"]
    assert snapshot.relations == []

    graph.clear_all()
    assert graph.get_statistics()["total_tables"] == 0
    assert graph.get_statistics()["total_fields"] == 0


def test_on_disk_graph_persists_and_opens_read_only(temp_db_path):
    writer = SchemaGraph(db_path=temp_db_path)
    table = _table(writer, "User")
    writer.close()

    reader = SchemaGraph(db_path=temp_db_path, read_only=True)
    try:
        assert reader.get_table(table.id).name == "User"
        with pytest.raises(RuntimeError, match="read-only"):
            reader.set_table_name(table.id, "Account")
        with pytest.raises(RuntimeError, match="read-only"):
            reader.clear_all()
    finally:
        reader.close()


def test_create_schema_again_keeps_data(graph):
    table = _table(graph, "User")
    _field(graph, table, "email")

    graph.schema_manager.create_schema()

    assert graph.get_statistics() == {
        "total_tables": 1,
        "total_fields": 1,
        "total_relations": 0,
    }
