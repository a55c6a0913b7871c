import pytest

from enum import IntEnum

from media_decoders.fixeddict import fixeddict, Entry, FixedDictKeyError


class MyEnum(IntEnum):
    a = 1
    b = 2
    c = 3


class TestEntry(object):
    def test_no_args(self):
        v = Entry("v")
        assert v.name == "v"
        assert v.formatter is str
        assert v.enum is None
        assert v.help is None

    def test_help_is_dedented(self):
        v = Entry(
            "v",
            help="""
                Some help
                text.
            """,
        )
        assert v.help == "Some help\ntext."

    def test_enum(self):
        v = Entry("v", enum=MyEnum)

        assert v.to_string(1) == "a (1)"
        assert v.to_string(MyEnum.b) == "b (2)"
        assert v.to_string(0) == "0"
        assert v.to_string("foo") == "foo"

        # Formatter applies to the value in brackets
        v = Entry("v", enum=MyEnum, formatter=hex)
        assert v.to_string(MyEnum.c) == "c (0x3)"
        assert v.to_string(16) == "0x10"

    def test_to_string(self):
        v = Entry("v")
        assert v.to_string(123) == "123"
        assert v.to_string("abc") == "abc"

        v = Entry("v", formatter=bin)
        assert v.to_string(0b1010) == "0b1010"


MyFixedDict = fixeddict(
    "MyFixedDict",
    # No formatter
    Entry("name"),
    # With a formatter
    Entry("age", formatter=hex, help="Age in years."),
    # Hidden value
    Entry("_hidden"),
    help="A test fixeddict.",
)


NOT_ALLOWED = r"'foo' not allowed in MyFixedDict"


class TestFixedDict(object):
    def test_constructors(self):
        # Check empty initialiser
        d = MyFixedDict()
        assert d == {}

        # Check can set values with kwargs
        d = MyFixedDict(name="Foo", age=123, _hidden=[1, 2, 3])
        assert d["name"] == "Foo"
        assert d["age"] == 123
        assert d["_hidden"] == [1, 2, 3]

        # Can initialise with dict
        d = MyFixedDict({"name": "Foo", "age": 123})
        assert d["name"] == "Foo"
        assert d["age"] == 123

    def test_values_as_items(self):
        d = MyFixedDict(name="Foo")

        assert d["name"] == "Foo"
        d["name"] = "Bar"
        assert d["name"] == "Bar"
        assert "name" in d

        del d["name"]
        assert "name" not in d

    def test_cannot_create_unknown_values(self):
        with pytest.raises(FixedDictKeyError, match=NOT_ALLOWED):
            MyFixedDict(foo="bar")
        with pytest.raises(FixedDictKeyError, match=NOT_ALLOWED):
            MyFixedDict([("foo", "bar")])

        d = MyFixedDict()

        with pytest.raises(FixedDictKeyError, match=NOT_ALLOWED):
            d["foo"] = "bar"
        with pytest.raises(FixedDictKeyError, match=NOT_ALLOWED):
            d.setdefault("foo", "bar")
        with pytest.raises(FixedDictKeyError, match=NOT_ALLOWED):
            d.update(foo="bar")
        with pytest.raises(FixedDictKeyError, match=NOT_ALLOWED):
            d.update({"foo": "bar"})

    def test_key_error_attributes(self):
        with pytest.raises(KeyError) as exc_info:
            MyFixedDict()["bad"] = 1
        assert exc_info.value.key == "bad"
        assert exc_info.value.fixeddict_class is MyFixedDict

    def test_update(self):
        d = MyFixedDict({})
        d.update(name="bar")
        assert d == {"name": "bar"}
        d.update({"age": 123})
        assert d == {"name": "bar", "age": 123}
        d.update([("age", 1)])
        assert d == {"name": "bar", "age": 1}

    def test_repr(self):
        # Should include hidden entries and be a valid constructor
        assert repr(MyFixedDict(name="Anon", _hidden=[])) == (
            "MyFixedDict({" "'name': 'Anon', " "'_hidden': []" "})"
        )

    def test_str(self):
        d = MyFixedDict(name="Anon", _hidden=[])

        # Should print only values which are set and not hidden
        assert str(d) == ("MyFixedDict:\n" "  name: Anon")

        # Should use formatters
        d["age"] = 32
        assert str(d) == ("MyFixedDict:\n" "  name: Anon\n" "  age: 0x20")

        # Should handle multi-line values
        d["name"] = "foo\nbar"
        assert str(d) == ("MyFixedDict:\n" "  name: foo\n" "  bar\n" "  age: 0x20")

        # Should work if we delete all values
        d.clear()
        assert str(d) == "MyFixedDict"

    def test_copy(self):
        d1 = MyFixedDict(name="Anon", age=100)
        del d1["name"]

        d2 = d1.copy()
        assert isinstance(d2, MyFixedDict)
        assert d2 is not d1
        assert "name" not in d2
        assert d2["age"] == 100

        d2["age"] = 10
        assert d1["age"] == 100  # Unchanged

    def test_docstring(self):
        assert MyFixedDict.__doc__ == (
            "A test fixeddict.\n"
            "\n"
            "Parameters\n"
            "==========\n"
            "name\n"
            "age\n"
            "    Age in years.\n"
            "_hidden"
        )

    def test_entry_objs(self):
        assert list(MyFixedDict.entry_objs) == ["name", "age", "_hidden"]
        assert MyFixedDict.entry_objs["age"].formatter is hex

    def test_module(self):
        assert MyFixedDict.__module__ == __name__
