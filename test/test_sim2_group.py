"""
Tests for Sim2 construction and group algebra.

Verifies:
- Constructors (identity, angle/matrix/xy forms, homogeneous matrix)
- Composition law (r1 r2, t1 / s2 + R1 t2, s1 s2)
- Identity, inverse and between laws
- Tolerance-based equality and immutability
"""

import math
import pickle

import numpy as np
import pytest

from sim2_geometry import ContractViolation, Sim2


class TestConstruction:
    """Tests for Sim2 constructors."""

    def test_default_is_identity(self):
        """Default construction has zero angle, zero translation, unit scale."""
        p = Sim2()
        assert p.theta() == 0.0
        np.testing.assert_array_equal(p.translation(), [0.0, 0.0])
        assert p.scale() == 1.0
        assert p.equals(Sim2.identity(), 0.0)

    def test_from_xy_theta(self):
        p = Sim2.from_xy_theta(1.0, 2.0, 0.3, 4.0)
        assert p.x() == 1.0
        assert p.y() == 2.0
        assert p.theta() == pytest.approx(0.3)
        assert p.scale() == 4.0

    def test_angle_and_rotation_matrix_forms_agree(self):
        R = np.array([[math.cos(0.7), -math.sin(0.7)], [math.sin(0.7), math.cos(0.7)]])
        a = Sim2(0.7, [1.0, -1.0], 2.0)
        b = Sim2(R, [1.0, -1.0], 2.0)
        assert a.equals(b, 1e-12)

    def test_angle_is_wrapped(self):
        assert Sim2(3 * math.pi / 2).theta() == pytest.approx(-math.pi / 2)
        assert Sim2(-math.pi).theta() == pytest.approx(math.pi)
        assert Sim2(7.0).theta() == pytest.approx(7.0 - 2 * math.pi)

    def test_from_matrix_reads_inverse_scale(self):
        """Scale is 1 / T[2, 2] of the 3x3 matrix."""
        c, s = math.cos(0.4), math.sin(0.4)
        T = np.array([
            [c, -s, 3.0],
            [s, c, -1.0],
            [0.0, 0.0, 0.25],
        ])
        p = Sim2.from_matrix(T)
        assert p.theta() == pytest.approx(0.4)
        np.testing.assert_allclose(p.translation(), [3.0, -1.0])
        assert p.scale() == pytest.approx(4.0)

    def test_matrix_round_trip(self, sim2_samples):
        for p in sim2_samples:
            M = p.matrix()
            assert M[2, 2] == pytest.approx(1.0 / p.scale())
            np.testing.assert_allclose(M[2, :2], [0.0, 0.0])
            assert Sim2.from_matrix(M).equals(p, 1e-12)

    def test_from_vector_round_trip(self, random_sim2):
        assert Sim2.from_vector(random_sim2.vector()).equals(random_sim2, 0.0)

    def test_matrix_product_is_composition(self, sim2_samples):
        for a in sim2_samples:
            for b in sim2_samples:
                product = Sim2.from_matrix(a.matrix() @ b.matrix())
                assert product.equals(a.compose(b), 1e-9)

    @pytest.mark.parametrize("bad", [
        np.eye(4),
        np.eye(2),
        np.ones(9),
    ])
    def test_from_matrix_rejects_wrong_shape(self, bad):
        with pytest.raises(ContractViolation):
            Sim2.from_matrix(bad)

    def test_from_matrix_rejects_nonpositive_inverse_scale(self):
        T = np.eye(3)
        T[2, 2] = 0.0
        with pytest.raises(ContractViolation):
            Sim2.from_matrix(T)

    @pytest.mark.parametrize("scale", [0.0, -1.0, float("nan"), float("inf")])
    def test_rejects_invalid_scale(self, scale):
        with pytest.raises(ContractViolation):
            Sim2(0.0, [0.0, 0.0], scale)

    def test_rejects_bad_translation(self):
        with pytest.raises(ContractViolation):
            Sim2(0.0, [1.0, 2.0, 3.0])

    def test_rejects_non_rotation_matrix(self):
        with pytest.raises(ContractViolation):
            Sim2(np.array([[2.0, 0.0], [0.0, 2.0]]))

    def test_contract_violation_is_value_error(self):
        with pytest.raises(ValueError):
            Sim2.from_matrix(np.eye(4))


class TestTestableInterface:
    """Tests for print, equals and immutability."""

    def test_print_with_label(self, capsys):
        Sim2.from_xy_theta(1.0, 2.0, 0.5, 3.0).print("pose: ")
        out = capsys.readouterr().out
        assert out.startswith("pose: Sim2(")
        assert "s=3" in out

    def test_str_matches_repr(self, random_sim2):
        assert str(random_sim2) == repr(random_sim2)

    def test_equals_reflexive(self, sim2_samples):
        for p in sim2_samples:
            for tol in (0.0, 1e-12, 1.0):
                assert p.equals(p, tol)

    def test_equals_symmetric(self, sim2_samples):
        for a in sim2_samples:
            for b in sim2_samples:
                for tol in (0.0, 1e-3, 10.0):
                    assert a.equals(b, tol) == b.equals(a, tol)

    def test_equals_componentwise(self):
        p = Sim2.from_xy_theta(1.0, 2.0, 0.5, 3.0)
        assert p.equals(Sim2.from_xy_theta(1.0 + 1e-6, 2.0, 0.5, 3.0), 1e-5)
        assert not p.equals(Sim2.from_xy_theta(1.0 + 1e-4, 2.0, 0.5, 3.0), 1e-5)
        assert not p.equals(Sim2.from_xy_theta(1.0, 2.0, 0.5 + 1e-4, 3.0), 1e-5)
        assert not p.equals(Sim2.from_xy_theta(1.0, 2.0, 0.5, 3.0 + 1e-4), 1e-5)

    def test_equals_across_angle_wrap(self):
        a = Sim2(math.pi - 1e-12)
        b = Sim2(-math.pi + 1e-12)
        assert a.equals(b, 1e-9)

    def test_equality_operator(self, random_sim2):
        assert random_sim2 == Sim2.from_vector(random_sim2.vector())
        assert random_sim2 != Sim2.identity()
        assert random_sim2 != "not a transform"

    def test_unhashable(self, random_sim2):
        with pytest.raises(TypeError):
            hash(random_sim2)

    def test_immutable(self, random_sim2):
        with pytest.raises(AttributeError):
            random_sim2._s = 2.0
        t = random_sim2.translation()
        t[0] = 100.0
        assert random_sim2.x() == pytest.approx(0.8)

    def test_pickle_round_trip(self, random_sim2):
        restored = pickle.loads(pickle.dumps(random_sim2))
        assert restored.equals(random_sim2, 0.0)


class TestGroupAlgebra:
    """Tests for identity, compose, inverse and between."""

    def test_composition_translation_formula(self):
        """p1=(1,0,0,s=2), p2=(0,1,pi/2,s=1) compose to (1,1,pi/2,s=2)."""
        p1 = Sim2.from_xy_theta(1.0, 0.0, 0.0, 2.0)
        p2 = Sim2.from_xy_theta(0.0, 1.0, math.pi / 2, 1.0)
        expected = Sim2.from_xy_theta(1.0, 1.0, math.pi / 2, 2.0)
        assert p1.compose(p2).equals(expected, 1e-12)

    def test_second_scale_divides_first_translation(self):
        p1 = Sim2.from_xy_theta(1.0, 2.0, 0.0, 2.0)
        p2 = Sim2.from_xy_theta(3.0, 4.0, 0.0, 4.0)
        result = p1.compose(p2)
        np.testing.assert_allclose(result.translation(), [1.0 / 4.0 + 3.0, 2.0 / 4.0 + 4.0])
        assert result.scale() == pytest.approx(8.0)

    def test_composition_general_formula(self, sim2_samples):
        for a in sim2_samples:
            for b in sim2_samples:
                c = a.compose(b)
                expected_t = a.translation() / b.scale() + a.rotation() @ b.translation()
                np.testing.assert_allclose(c.translation(), expected_t, atol=1e-12)
                assert c.scale() == pytest.approx(a.scale() * b.scale())
                assert math.cos(c.theta()) == pytest.approx(math.cos(a.theta() + b.theta()))
                assert math.sin(c.theta()) == pytest.approx(math.sin(a.theta() + b.theta()))

    def test_not_commutative(self):
        p1 = Sim2.from_xy_theta(1.0, 0.0, 0.0, 2.0)
        p2 = Sim2.from_xy_theta(0.0, 1.0, math.pi / 2, 1.0)
        assert p2.compose(p1).equals(Sim2.from_xy_theta(0.0, 1.5, math.pi / 2, 2.0), 1e-12)
        assert not p1.compose(p2).equals(p2.compose(p1), 1e-6)

    def test_mul_operator(self, random_sim2):
        other = Sim2.from_xy_theta(-1.0, 0.5, 2.0, 0.5)
        assert (random_sim2 * other).equals(random_sim2.compose(other), 0.0)

    def test_identity_law(self, sim2_samples):
        e = Sim2.identity()
        for p in sim2_samples:
            assert p.compose(e).equals(p, 1e-12)
            assert e.compose(p).equals(p, 1e-12)

    def test_inverse_law(self, sim2_samples):
        e = Sim2.identity()
        for p in sim2_samples:
            assert p.compose(p.inverse()).equals(e, 1e-9)
            assert p.inverse().compose(p).equals(e, 1e-9)

    def test_inverse_components(self):
        p = Sim2.from_xy_theta(1.0, 2.0, 0.3, 2.0)
        inv = p.inverse()
        assert inv.theta() == pytest.approx(-0.3)
        assert inv.scale() == pytest.approx(0.5)
        np.testing.assert_allclose(inv.translation(), -2.0 * (p.rotation().T @ [1.0, 2.0]))

    def test_associative(self, sim2_samples):
        a, b, c = sim2_samples[1], sim2_samples[3], sim2_samples[4]
        assert a.compose(b).compose(c).equals(a.compose(b.compose(c)), 1e-9)

    def test_between(self, sim2_samples):
        for a in sim2_samples:
            for b in sim2_samples:
                rel = a.between(b)
                assert rel.equals(a.inverse().compose(b), 1e-12)
                assert a.compose(rel).equals(b, 1e-9)

    def test_operations_do_not_mutate(self, random_sim2):
        before = random_sim2.vector()
        other = Sim2.from_xy_theta(2.0, 1.0, -0.4, 3.0)
        random_sim2.compose(other)
        random_sim2.inverse()
        random_sim2.between(other)
        random_sim2.retract([0.1, 0.2, 0.3, 0.4])
        np.testing.assert_array_equal(random_sim2.vector(), before)

    def test_jacobians_only_when_requested(self, random_sim2):
        other = Sim2.from_xy_theta(2.0, 1.0, -0.4, 3.0)
        assert isinstance(random_sim2.compose(other), Sim2)
        result, H1, H2 = random_sim2.compose(other, jacobians=True)
        assert isinstance(result, Sim2)
        assert H1.shape == (4, 4)
        assert H2.shape == (4, 4)
        inv, H = random_sim2.inverse(jacobians=True)
        assert isinstance(inv, Sim2)
        assert H.shape == (4, 4)
