import pytest
from unitforge.support.templates import render_offline_test


def test_render_function_skeleton():
    code = render_offline_test("add", is_class=False)
    assert "import { add } from './path-to-module';" in code
    assert "describe('add', () => {" in code
    assert "test('should be defined'" in code
    assert "expect(add).toBeDefined();" in code
    assert "offline mode" in code
    assert code.endswith("});\n")


def test_render_class_skeleton():
    code = render_offline_test("Cart", is_class=True)
    assert "beforeEach(() => {" in code
    assert "instance = new Cart();" in code
    assert "expect(instance).toBeDefined();" in code


def test_render_qualified_name_imports_owner():
    code = render_offline_test("Cart.total", is_class=False)
    assert "import { Cart } from" in code
    assert "describe('Cart.total'" in code


def test_render_mocha():
    code = render_offline_test("add", is_class=False, framework="mocha")
    assert "import { expect } from 'chai';" in code
    assert "it('should be defined'" in code
    assert "expect(add).to.exist;" in code


def test_render_vitest():
    code = render_offline_test("add", is_class=False, framework="vitest")
    assert code.startswith("import { describe, test, expect, beforeEach } from 'vitest';")


@pytest.mark.parametrize("framework", ["jest", "mocha", "vitest"])
def test_braces_balanced(framework):
    code = render_offline_test("Thing", is_class=True, framework=framework)
    assert code.count("{") == code.count("}")
    assert code.count("(") == code.count(")")
