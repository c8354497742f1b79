"""
Dependency graph between derived fields and their parents.

Edges point from a derived field to each of its parent fields. The graph
is rebuilt from the field list whenever the schema changes, which is
cheap for form-sized schemas.
"""

from typing import Iterable

from form_engine.models.field_definitions import FormField


class DependencyGraph:
    """
    Directed graph keyed by field id.

    Usage:
        graph = DependencyGraph.from_fields(schema.fields)
        graph.find_cycles()        # [["total", "subtotal"]]
        graph.evaluation_order()   # derived ids, parents first
    """

    def __init__(self, field_ids: list[str], edges: dict[str, list[str]], derived: set[str]):
        self._field_ids = field_ids
        self._position = {field_id: index for index, field_id in enumerate(field_ids)}
        self._edges = edges
        self._derived = derived

    @classmethod
    def from_fields(cls, fields: Iterable[FormField]) -> "DependencyGraph":
        ordered = sorted(fields, key=lambda f: f.order)
        edges: dict[str, list[str]] = {}
        derived: set[str] = set()
        for field in ordered:
            if field.is_derived and field.derived_config is not None:
                derived.add(field.id)
                # Keep first occurrence order, drop duplicates
                edges[field.id] = list(dict.fromkeys(field.derived_config.parent_fields))
        return cls([f.id for f in ordered], edges, derived)

    @property
    def field_ids(self) -> list[str]:
        return list(self._field_ids)

    def parents_of(self, field_id: str) -> list[str]:
        return list(self._edges.get(field_id, []))

    def dependents_of(self, field_id: str) -> list[str]:
        """Derived fields that list ``field_id`` as a parent."""
        return [f for f in self._field_ids if field_id in self._edges.get(f, [])]

    def missing_parents(self) -> dict[str, list[str]]:
        """Parent ids that are not fields of the schema, per derived field."""
        missing: dict[str, list[str]] = {}
        for field_id in self._field_ids:
            unknown = [p for p in self._edges.get(field_id, []) if p not in self._position]
            if unknown:
                missing[field_id] = unknown
        return missing

    def find_cycles(self) -> list[list[str]]:
        """
        Return every group of fields that depend on each other.

        Each group is a strongly connected component with more than one
        member, or a single field listing itself as a parent. Members are
        in field order and groups are ordered by their first member.
        """
        index_of: dict[str, int] = {}
        low: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        components: list[list[str]] = []
        counter = 0

        def visit(node: str) -> None:
            nonlocal counter
            index_of[node] = low[node] = counter
            counter += 1
            stack.append(node)
            on_stack.add(node)

            for parent in self._edges.get(node, []):
                if parent not in self._position:
                    continue
                if parent not in index_of:
                    visit(parent)
                    low[node] = min(low[node], low[parent])
                elif parent in on_stack:
                    low[node] = min(low[node], index_of[parent])

            if low[node] == index_of[node]:
                component: list[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(component)

        for field_id in self._field_ids:
            if field_id not in index_of:
                visit(field_id)

        cycles = []
        for component in components:
            if len(component) > 1 or component[0] in self._edges.get(component[0], []):
                cycles.append(sorted(component, key=self._position.__getitem__))
        cycles.sort(key=lambda members: self._position[members[0]])
        return cycles

    def cycle_members(self) -> set[str]:
        return {member for cycle in self.find_cycles() for member in cycle}

    def evaluation_order(self) -> list[str]:
        """
        Derived field ids ordered so that parents come before dependents.

        Cycle members are left out; ties keep field order.
        """
        excluded = self.cycle_members()
        pending = [f for f in self._field_ids if f in self._derived and f not in excluded]
        done: set[str] = set()
        order: list[str] = []

        while pending:
            for field_id in pending:
                blocking = [
                    p for p in self._edges.get(field_id, [])
                    if p in self._derived and p not in excluded and p not in done
                ]
                if not blocking:
                    break
            order.append(field_id)
            done.add(field_id)
            pending.remove(field_id)

        return order
