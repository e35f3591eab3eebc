"""Tests for the Value handle and its operators."""

from fractions import Fraction

import pytest

from fieldgrad import Value, Identity, Pow, LeafOnlyError, BackwardError


class TestConstruction:
    def test_defaults(self):
        x = Value(2.0)
        assert x.data == 2.0
        assert x.grad is None
        assert not x.has_grad
        assert x.is_leaf
        assert not x.requires_grad

    def test_int_promoted_to_float(self):
        x = Value(3)
        assert isinstance(x.data, float)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            Value(True)

    def test_unregistered_type_rejected(self):
        with pytest.raises(TypeError):
            Value("2.0")

    def test_data_is_writable(self):
        x = Value(2.0)
        x.data = 5.0
        assert x.data == 5.0


class TestRequiresGrad:
    def test_passes_to_result(self):
        x = Value(2.0, requires_grad=True)
        y = Value(2.0)
        assert (x + y).requires_grad

    def test_not_passed_without_tracked_operand(self):
        x = Value(2.0)
        y = Value(2.0)
        z = x + y
        assert not z.requires_grad
        assert z.is_leaf

    def test_set_on_leaf(self):
        x = Value(2.0)
        x.requires_grad = True
        assert x.requires_grad
        x.requires_grad = False
        assert not x.requires_grad

    def test_set_on_derived_rejected(self):
        x = Value(2.0, requires_grad=True)
        y = Identity.apply(x)
        with pytest.raises(LeafOnlyError):
            y.requires_grad = False

    def test_backward_on_untracked_result_fails(self):
        z = Value(1.0) + Value(2.0)
        with pytest.raises(BackwardError):
            z.backward()


class TestCopy:
    def test_data_is_copied(self):
        x = Value(2.0, requires_grad=True)
        assert x.copy().data == x.data

    def test_requires_grad_is_passed_as_argument(self):
        x = Value(2.0, requires_grad=True)
        assert not x.copy().requires_grad
        assert x.copy(True).requires_grad

    def test_grad_is_not_copied(self):
        x = Value(2.0, requires_grad=True)
        Identity.apply(x).backward()
        z = x.copy(True)
        assert x.has_grad
        assert not z.has_grad

    def test_copy_of_derived_is_detached_leaf(self):
        x = Value(2.0, requires_grad=True)
        y = x * x
        c = y.copy(True)
        assert c.is_leaf
        c.backward()
        assert not x.has_grad


class TestConnect:
    def test_connect_appends_dependency(self):
        x = Value(2.0, requires_grad=True)
        y = Value(3.0)
        y.connect(x)
        assert y._node.dependencies == [x._node]


class TestOperators:
    def test_add(self):
        x1, y1 = Value(2.0, True), Value(3.0, True)
        s = x1 + y1
        s.backward()
        assert s.data == 5.0
        assert x1.grad == 1.0
        assert y1.grad == 1.0

    def test_mul(self):
        x2, y2 = Value(2.0, True), Value(3.0, True)
        p = x2 * y2
        p.backward()
        assert p.data == 6.0
        assert x2.grad == 3.0
        assert y2.grad == 2.0

    def test_sub(self):
        x, y = Value(5.0, True), Value(3.0, True)
        z = x - y
        z.backward()
        assert z.data == 2.0
        assert x.grad == 1.0
        assert y.grad == -1.0

    def test_div(self):
        x, y = Value(6.0, True), Value(2.0, True)
        z = x / y
        z.backward()
        assert z.data == 3.0
        assert x.grad == pytest.approx(0.5)
        assert y.grad == pytest.approx(-1.5)

    def test_neg(self):
        x = Value(4.0, True)
        z = -x
        z.backward()
        assert z.data == -4.0
        assert x.grad == -1.0

    def test_plain_numbers(self):
        x = Value(2.0, True)
        z = 3 * x + 1
        z.backward()
        assert z.data == 7.0
        assert x.grad == 3.0

    def test_reflected_sub_and_div(self):
        x = Value(2.0, True)
        a = 1 - x
        b = 1 / x
        assert a.data == -1.0
        assert b.data == 0.5

    def test_same_operand_twice(self):
        x = Value(3.0, True)
        z = x * x
        z.backward()
        assert x.grad == 6.0

    def test_pow_operator(self):
        x = Value(2.0, True)
        y = x ** 3
        y.backward()
        assert y.data == 8.0
        assert x.grad == 12.0

    def test_fraction_is_exact(self):
        x = Value(Fraction(1, 3), True)
        y = Value(Fraction(2, 5), True)
        z = x / y
        z.backward()
        assert z.data == Fraction(5, 6)
        assert x.grad == Fraction(5, 2)
        assert y.grad == Fraction(-25, 12)


class TestPow:
    def test_positive_exponent(self):
        x = Value(2.0, True)
        y = Pow.apply(x, 5)
        y.backward()
        assert y.data == 32.0
        assert x.grad == 80.0

    def test_negative_exponent(self):
        x = Value(2.0, True)
        y = Pow.apply(x, -2)
        y.backward()
        assert y.data == pytest.approx(0.25)
        assert x.grad == pytest.approx(-0.25)

    def test_zero_exponent(self):
        x = Value(3.0, True)
        y = Pow.apply(x, 0)
        y.backward()
        assert y.data == 1.0
        assert x.grad == 0.0

    def test_non_integer_exponent_rejected(self):
        with pytest.raises(TypeError):
            Pow.apply(Value(2.0, True), 0.5)

    def test_fraction_negative_exponent(self):
        x = Value(Fraction(2, 3), True)
        y = x ** -3
        y.backward()
        assert y.data == Fraction(27, 8)
        assert x.grad == Fraction(-243, 16)


class TestRepr:
    def test_str_without_grad(self):
        assert str(Value(2.0)) == "data: 2.0 grad: None"

    def test_str_with_grad(self):
        x = Value(2.0, True)
        Identity.apply(x).backward()
        assert str(x) == "data: 2.0 grad: 1.0"

    def test_repr(self):
        assert repr(Value(2.0)) == "Value(data=2.0)"
        assert repr(Value(2.0, True)) == "Value(data=2.0, requires_grad=True)"
