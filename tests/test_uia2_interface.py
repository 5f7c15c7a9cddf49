import pytest

from command_kit.tree import Tree
from uia2_interface_kit.hierarchy import ElementSelector, parse_bounds, parse_hierarchy
from uia2_interface_kit.interface import Uia2Interface

HIERARCHY = """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>
<hierarchy rotation="0">
  <node index="0" text="" resource-id="" class="android.widget.FrameLayout" package="com.example"
        content-desc="" clickable="false" focusable="false" bounds="[0,0][1080,1920]">
    <node index="0" text="Settings" resource-id="com.example:id/title" class="android.widget.TextView"
          content-desc="" clickable="false" focusable="false" bounds="[0,0][1080,100]" />
    <node index="1" text="Wi-Fi" resource-id="com.example:id/wifi" class="android.widget.Button"
          content-desc="Wireless settings" clickable="true" focusable="true" bounds="[0,100][1080,200]">
      <node index="0" text="" resource-id="" class="android.widget.Switch" content-desc="Wi-Fi toggle"
            checkable="true" checked="true" clickable="true" focusable="true" bounds="[900,120][1060,180]" />
    </node>
    <node index="2" text="hello" resource-id="com.example:id/search" class="android.widget.EditText"
          content-desc="Search" clickable="true" focusable="true" focused="true" bounds="[0,200][1080,300]" />
  </node>
</hierarchy>
"""


class FakeDevice:
    def __init__(self, xml=HIERARCHY, type_result=None):
        self.xml = xml
        self.calls = []
        self.type_result = type_result or {"ok": True, "method": "send_keys"}

    def dump_hierarchy(self):
        return self.xml

    def click(self, x, y):
        self.calls.append(("click", x, y))

    def type_text(self, content):
        self.calls.append(("type", content))
        return self.type_result


def test_parse_bounds():
    assert parse_bounds("[0,63][1080,210]") == (0, 63, 1080, 210)
    assert parse_bounds(None) == (0, 0, 0, 0)
    assert ElementSelector("0", (0, 100, 1080, 200)).center == (540, 150)


def test_parse_hierarchy_records():
    records = parse_hierarchy(HIERARCHY)
    assert [r.id for r in records] == ["0", "0.0", "0.1", "0.1.0", "0.2"]
    assert [r.parent_id for r in records] == [None, "0", "0", "0.1", "0"]
    assert [r.remove for r in records] == [True, True, False, False, False]

    wifi = records[2].node
    assert wifi.name == "Wi-Fi"
    assert wifi.description == "Wireless settings"
    assert wifi.role == "Button"
    assert wifi.properties == {"id": "wifi"}

    switch = records[3].node
    assert switch.name == "Wi-Fi toggle"
    assert switch.description is None
    assert switch.properties == {"checked": "true"}

    search = records[4].node
    assert search.name == "Search"
    assert search.state == "hello"
    assert search.properties == {"id": "search", "focused": "true"}


def test_compute_tree_filters_and_nests():
    tree = Uia2Interface(FakeDevice(), log_fn=None).compute_tree()
    assert isinstance(tree, Tree)
    assert [n.name for n in tree.roots] == ["Wi-Fi", "Search"]
    assert [n.name for n in tree.roots[0].children] == ["Wi-Fi toggle"]
    assert tree.to_text().splitlines() == [
        '- [0] "Wi-Fi" (Button) (Wireless settings) {id: wifi}',
        '\t- [3] "Wi-Fi toggle" (Switch) {checked: true}',
        '- [6] "Search" (EditText) {id: search, focused: true} with state hello',
    ]


def test_dry_run_only_logs():
    logs = []
    device = FakeDevice()
    iface = Uia2Interface(device, dry_run=True, log_fn=logs.append)
    sel = iface.compute_tree().selectors[0]
    iface.click(sel)
    iface.type_text(sel, "abc")
    assert device.calls == []
    assert len(logs) == 2 and all(line.startswith("[DRY-RUN]") for line in logs)


def test_click_and_type_on_device():
    device = FakeDevice()
    iface = Uia2Interface(device, dry_run=False, settle_ms=0, log_fn=None)
    tree = iface.compute_tree()
    iface.click(tree.resolve(0))
    iface.type_text(tree.resolve(6), "cats")
    assert device.calls == [("click", 540, 150), ("click", 540, 250), ("type", "cats")]


def test_type_failure_raises():
    device = FakeDevice(type_result={"ok": False, "method": "none", "error": "no ime"})
    iface = Uia2Interface(device, dry_run=False, settle_ms=0, log_fn=None)
    tree = iface.compute_tree()
    with pytest.raises(RuntimeError, match="no ime"):
        iface.type_text(tree.resolve(6), "cats")
