from conftest import SMALL_ZONES
from constraints import (
    HiddenSingleConstraint,
    MinimumDistanceConstraint,
    PartnerExistenceConstraint,
    UniquePartnerConstraint,
    ZoneExclusionConstraint,
    build_rules,
    has_partner,
)
from model import Grid, PuzzleModel


def grid_from_values(model, rows):
    return Grid(
        model,
        {(r, c): {rows[r][c]} for r in range(model.rows) for c in range(model.cols)},
    )


def test_zone_exclusion_removes_known_value_from_zone():
    model = PuzzleModel(SMALL_ZONES, [(0, 0, 2)])
    grid = model.new_grid()
    rule = ZoneExclusionConstraint(model)
    assert rule.propagate(grid)
    assert grid.candidates[(0, 1)] == {1}
    assert grid.candidates[(0, 2)] == {1, 2}
    assert not rule.propagate(grid)


def test_zone_exclusion_empties_duplicated_givens():
    model = PuzzleModel(SMALL_ZONES, [(0, 0, 1), (0, 1, 1)])
    grid = model.new_grid()
    ZoneExclusionConstraint(model).propagate(grid)
    assert grid.is_contradicted()


def test_minimum_distance_clears_disk():
    model = PuzzleModel([[0, 0, 0, 0, 0]], [(0, 0, 3)])
    grid = model.new_grid()
    assert MinimumDistanceConstraint(model).propagate(grid)
    assert grid.candidates[(0, 0)] == {3}
    assert 3 not in grid.candidates[(0, 1)]
    assert 3 not in grid.candidates[(0, 2)]
    assert 3 in grid.candidates[(0, 3)]
    assert 3 in grid.candidates[(0, 4)]


def test_unique_partner_assigns_only_candidate():
    model = PuzzleModel(SMALL_ZONES, [(0, 0, 2)])
    grid = model.new_grid()
    assert UniquePartnerConstraint(model).propagate(grid)
    assert grid.candidates[(0, 2)] == {2}


def test_unique_partner_waits_for_a_single_candidate(small_model):
    grid = small_model.new_grid()
    assert not UniquePartnerConstraint(small_model).propagate(grid)
    assert grid == small_model.new_grid()


def test_hidden_single_assigns_only_holder(small_model):
    grid = small_model.new_grid()
    grid.candidates[(0, 1)] = {2}
    assert HiddenSingleConstraint(small_model).propagate(grid)
    assert grid.candidates[(0, 0)] == {1}


def test_partner_existence_prunes_partnerless_values():
    model = PuzzleModel([[0, 0, 1, 1]])
    grid = model.new_grid()
    assert PartnerExistenceConstraint(model).propagate(grid)
    assert grid.candidates[(0, 0)] == {2}
    assert grid.candidates[(0, 1)] == {1, 2}
    assert grid.candidates[(0, 2)] == {1, 2}
    assert grid.candidates[(0, 3)] == {2}


def test_rules_accept_valid_solution(small_model):
    grid = grid_from_values(small_model, [[2, 1, 2], [1, 1, 1]])
    assignment = grid.assignment()
    for rule in build_rules(small_model):
        assert rule.is_satisfied(assignment), rule.name


def test_rules_reject_broken_assignment(small_model):
    grid = grid_from_values(small_model, [[1, 2, 2], [1, 1, 1]])
    assignment = grid.assignment()
    failed = [rule.name for rule in build_rules(small_model) if not rule.is_satisfied(assignment)]
    assert failed == ["minimum-distance", "unique-partner", "partner-existence"]


def test_zone_exclusion_rejects_repeated_value(small_model):
    grid = grid_from_values(small_model, [[1, 1, 2], [1, 1, 1]])
    assert not ZoneExclusionConstraint(small_model).is_satisfied(grid.assignment())
    assert not HiddenSingleConstraint(small_model).is_satisfied(grid.assignment())


def test_has_partner(small_model):
    assignment = grid_from_values(small_model, [[2, 1, 2], [1, 1, 1]]).assignment()
    assert has_partner(small_model, assignment, (0, 0))
    assert has_partner(small_model, assignment, (1, 2))


def test_build_rules_order(small_model):
    assert [rule.name for rule in build_rules(small_model)] == [
        "zone-exclusion",
        "minimum-distance",
        "unique-partner",
        "hidden-single",
        "partner-existence",
    ]
