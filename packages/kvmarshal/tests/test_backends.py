from kvmarshal import MapKV, NullValue, StringValue


def test_map_kv_returns_values(background):
    kv = MapKV({"host": "localhost"}, port="8500")
    assert kv.get(background, "host") == StringValue("localhost")
    assert kv.get(background, "port") == StringValue("8500")
    assert kv.get(background, "missing") is NullValue


def test_map_kv_container_protocol():
    kv = MapKV({"a": "1"}).set("b", "2")
    assert "a" in kv and "b" in kv
    assert "c" not in kv
    assert len(kv) == 2
    assert sorted(kv) == ["a", "b"]
    assert repr(kv) == "MapKV({'a': '1', 'b': '2'})"


def test_map_kv_is_not_a_dict():
    # dict.get(key, default) would shadow the backend signature
    assert not isinstance(MapKV(), dict)


def test_map_kv_copies_its_input(background):
    data = {"a": "1"}
    kv = MapKV(data)
    data["a"] = "changed"
    assert kv.get(background, "a") == StringValue("1")
