"""Tests for SceneController topology maintenance."""

from unittest.mock import MagicMock, patch

from conftest import EventLog, make_node, make_wire
from schemnet.controllers.scene_controller import SceneController


class TestObserverPattern:
    def test_add_observer(self, controller):
        log = EventLog()
        controller.add_observer(log)
        controller.add_wire(make_wire((0, 0), (10, 0)))
        assert "item_added" in log.names()

    def test_remove_observer(self, controller):
        log = EventLog()
        controller.add_observer(log)
        controller.remove_observer(log)
        controller.add_wire(make_wire((0, 0), (10, 0)))
        assert log.events == []

    def test_duplicate_observer_not_added(self, controller):
        log = EventLog()
        controller.add_observer(log)
        controller.add_observer(log)
        controller.add_node(make_node())
        assert log.names() == ["item_added"]

    def test_failing_observer_is_logged(self, controller, events, caplog):
        def broken(event, data):
            raise AttributeError("stale view")

        controller.add_observer(broken)
        controller.add_node(make_node())
        assert "Error notifying observer" in caplog.text
        assert events.names() == ["item_added"]

    def test_notifications_wait_for_the_edit_to_finish(self, controller):
        wire_a = make_wire((0, 0), (100, 0))
        controller.add_wire(wire_a)
        seen = []

        def observer(event, data):
            if event == "item_added":
                seen.append((len(controller.nets()), data.net is wire_a.net))

        controller.add_observer(observer)
        controller.add_wire(make_wire((50, 0), (50, 100)))
        assert seen == [(1, True)]

    def test_notify_reaches_observers(self, controller, events):
        controller.notify("model_saved", "scene.json")
        assert events.events == [("model_saved", "scene.json")]

    def test_net_changed_is_collapsed(self, controller, events):
        wire_a = make_wire((0, 0), (100, 0))
        controller.add_wire(wire_a)
        events.clear()
        controller.add_wire(make_wire((50, 0), (50, 100)))
        assert events.of("net_changed").count(wire_a.net) == 1


class TestAddWire:
    def test_single_wire_gets_its_own_net(self, controller, events):
        wire = make_wire((0, 0), (100, 0))
        assert controller.add_wire(wire)
        assert len(controller.nets()) == 1
        assert controller.net(wire) is wire.net
        assert controller.wires() == [wire]
        assert ("item_added", wire) in events.events

    def test_add_twice_is_refused(self, controller):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        assert controller.add_wire(wire) is False
        assert len(controller.nets()) == 1

    def test_empty_wire_is_refused(self, controller):
        assert controller.add_wire(make_wire()) is False
        assert controller.nets() == []

    def test_junction_on_interior(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        assert len(controller.nets()) == 1
        assert wire_a.connected_wires == {wire_b}
        assert wire_b.connected_wires == set()
        assert wire_b.point_is_junction(0)
        assert not wire_b.point_is_junction(1)

    def test_new_wire_over_existing_endpoint(self, controller):
        upright = make_wire((50, 0), (50, 100))
        controller.add_wire(upright)
        crossing = make_wire((0, 0), (100, 0))
        controller.add_wire(crossing)
        assert len(controller.nets()) == 1
        assert crossing.connected_wires == {upright}
        assert upright.point_is_junction(0)

    def test_shared_endpoint_connects_without_junction(self, controller):
        wire_a = make_wire((0, 0), (100, 0))
        wire_b = make_wire((100, 0), (100, 100))
        controller.add_wire(wire_a)
        controller.add_wire(wire_b)
        assert len(controller.nets()) == 1
        assert wire_a.connected_wires == {wire_b}
        assert wire_b.connected_wires == set()
        assert wire_b.junctions() == []
        assert wire_a.junctions() == []

    def test_crossing_wires_stay_apart(self, controller):
        controller.add_wire(make_wire((0, 50), (100, 50)))
        controller.add_wire(make_wire((50, 0), (50, 100)))
        assert len(controller.nets()) == 2

    def test_wire_bridging_two_nets_merges_them(self, controller):
        left = make_wire((0, 0), (0, 100))
        right = make_wire((100, 0), (100, 100))
        controller.add_wire(left)
        controller.add_wire(right)
        bridge = make_wire((0, 50), (100, 50))
        controller.add_wire(bridge)
        assert len(controller.nets()) == 1
        assert left.connected_wires == {bridge}
        assert right.connected_wires == {bridge}
        assert bridge.junctions() == [0, 1]


class TestRemoveWire:
    def test_removing_last_wire_deletes_net(self, controller, events):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        net = wire.net
        events.clear()
        assert controller.remove_wire(wire)
        assert controller.nets() == []
        assert wire.net is None
        assert ("net_changed", net) in events.events
        assert ("item_removed", wire) in events.events

    def test_remove_unknown_wire(self, controller):
        assert controller.remove_wire(make_wire((0, 0), (10, 0))) is False

    def test_removing_middle_wire_splits_net(self, controller):
        wire_a = make_wire((0, 0), (100, 0))
        wire_b = make_wire((100, 0), (200, 0))
        wire_c = make_wire((200, 0), (300, 0))
        for wire in (wire_a, wire_b, wire_c):
            controller.add_wire(wire)
        assert len(controller.nets()) == 1
        net = wire_a.net

        controller.remove_wire(wire_b)
        assert len(controller.nets()) == 2
        assert wire_a.net is net
        assert wire_c.net is not net
        assert wire_a.connected_wires == set()

    def test_removing_host_clears_junction_flag(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        controller.remove_wire(wire_a)
        assert not wire_b.point_is_junction(0)
        assert controller.nets() == [wire_b.net]

    def test_removing_wire_detaches_connectors(self, controller):
        node = make_node(connectors=[(0, 0)])
        controller.add_node(node)
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        connector = node.connectors()[0]
        assert connector.attached_wire is wire
        controller.remove_wire(wire)
        assert not connector.is_attached()


class TestWirePointMoves:
    def test_moving_junction_off_host_splits_net(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        controller.move_wire_point(wire_b, 0, (50, -50))
        assert len(controller.nets()) == 2
        assert wire_a.connected_wires == set()
        assert not wire_b.point_is_junction(0)

    def test_sliding_junction_along_host_keeps_net(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        controller.move_wire_point(wire_b, 0, (60, 0))
        assert len(controller.nets()) == 1
        assert wire_a.connected_wires == {wire_b}
        assert wire_b.point_is_junction(0)

    def test_moving_endpoint_onto_wire_merges(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        stub = make_wire((0, 50), (30, 50))
        controller.add_wire(stub)
        assert len(controller.nets()) == 2
        controller.move_wire_point(stub, 1, (50, 50))
        assert len(controller.nets()) == 1
        assert wire_b.connected_wires == {stub}
        assert stub.point_is_junction(1)

    def test_moving_interior_point_reconsiders_attached_wires(self, controller):
        bent = make_wire((0, 0), (100, 0), (100, 100))
        controller.add_wire(bent)
        branch = make_wire((50, 0), (50, -50))
        controller.add_wire(branch)
        controller.move_wire_point(bent, 1, (100, 10))
        # The branch endpoint is now off the first segment
        assert len(controller.nets()) == 2

    def test_moving_host_away_breaks_junction(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        controller.move_items([wire_a], [(0, -50)])
        assert len(controller.nets()) == 2
        assert wire_a.connected_wires == set()
        assert not wire_b.point_is_junction(0)

    def test_out_of_range_index_is_ignored(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        assert controller.move_wire_point(wire_b, 9, (0, 0)) is False
        controller.on_wire_point_moved_by_user(wire_b, -1)
        assert len(controller.nets()) == 1

    def test_endpoint_moved_off_connector_detaches(self, controller):
        node = make_node(connectors=[(0, 0)])
        controller.add_node(node)
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        connector = node.connectors()[0]

        controller.move_wire_point(wire, 0, (0, 50))
        assert not connector.is_attached()

        controller.move_wire_point(wire, 0, (0, 0))
        assert connector.attached_wire is wire
        assert connector.attached_wire_point == 0


class TestNodes:
    def test_add_node_binds_free_endpoint(self, controller):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        node = make_node(pos=(80, -20), connectors=[(20, 20)])
        controller.add_node(node)
        connector = node.connectors()[0]
        assert connector.attached_wire is wire
        assert connector.attached_wire_point == 1

    def test_junction_endpoint_is_not_bound(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        node = make_node(pos=(50, 0), connectors=[(0, 0)])
        controller.add_node(node)
        assert not node.connectors()[0].is_attached()

    def test_endpoint_held_by_another_connector_is_not_bound(self, controller):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        first = make_node(connectors=[(0, 0)])
        second = make_node(connectors=[(0, 0)])
        controller.add_node(first)
        controller.add_node(second)
        assert first.connectors()[0].is_attached()
        assert not second.connectors()[0].is_attached()

    def test_moving_node_drags_bound_point(self, controller, events):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        node = make_node(connectors=[(0, 0)])
        controller.add_node(node)
        events.clear()

        controller.move_items([node], [(10, 5)])
        assert wire.points_absolute() == [(10, 5), (100, 0)]
        assert events.of("net_changed") == []

    def test_moving_lone_node(self, controller):
        node = make_node(pos=(0, 0), connectors=[(0, 0)])
        controller.add_node(node)
        assert not controller.contains_wire(node)

        controller.move_items([node], [(10, 5)])
        assert node.pos == (10, 5)
        assert controller.wires() == []

    def test_moving_node_and_its_wire_together(self, controller):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        node = make_node(connectors=[(0, 0)])
        controller.add_node(node)
        controller.move_items([node, wire], [(10, 10), (10, 10)])
        assert wire.points_absolute() == [(10, 10), (110, 10)]
        assert node.connectors()[0].attached_wire is wire

    def test_rotating_node_moves_bound_point(self, controller):
        wire = make_wire((40, 20), (100, 20))
        controller.add_wire(wire)
        node = make_node(connectors=[(40, 20)], size=(40, 40))
        controller.add_node(node)
        controller.rotate_node(node, 90)
        assert wire.first_point() == (20, 40)
        assert node.connectors()[0].attached_wire is wire

    def test_remove_node_keeps_wires(self, controller, events):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        node = make_node(connectors=[(0, 0)])
        controller.add_node(node)
        assert controller.remove_node(node)
        assert not node.connectors()[0].is_attached()
        assert controller.nodes() == []
        assert controller.wires() == [wire]
        assert ("item_removed", node) in events.events

    def test_connection_points(self, controller):
        controller.add_node(make_node(pos=(10, 10), connectors=[(0, 0), (40, 0)]))
        assert controller.connection_points() == [(10, 10), (50, 10)]
        assert len(controller.connectors()) == 2


class TestNetOperations:
    def test_merge_same_net_returns_false(self, controller):
        wire = make_wire((0, 0), (10, 0))
        controller.add_wire(wire)
        assert controller.merge_nets(wire.net, wire.net) is False

    def test_merge_keeps_survivor_name(self, controller):
        wire_a = make_wire((0, 0), (100, 0))
        controller.add_wire(wire_a)
        controller.set_net_name(wire_a.net, "VCC")
        controller.add_wire(make_wire((50, 0), (50, 50)))
        assert [net.name for net in controller.nets()] == ["VCC"]

    def test_absorbed_name_is_dropped(self, controller):
        wire_a = make_wire((0, 0), (100, 0))
        wire_c = make_wire((0, 200), (100, 200))
        controller.add_wire(wire_a)
        controller.add_wire(wire_c)
        controller.set_net_name(wire_c.net, "GND")
        survivor = wire_a.net
        assert controller.merge_nets(survivor, wire_c.net)
        assert controller.nets() == [survivor]
        assert survivor.name == ""
        assert wire_c.net is survivor

    def test_rename_notifies(self, controller, events):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        events.clear()
        controller.set_net_name(wire.net, "OUT")
        assert events.events == [("net_changed", wire.net)]

    def test_wires_connected_to(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        assert controller.wires_connected_to(wire_a) == [wire_a, wire_b]
        assert controller.wires_connected_to(wire_b) == [wire_b, wire_a]
        assert controller.wires_connected_to(make_wire((0, 0), (1, 0))) == []

    def test_nets_at(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        assert controller.nets_at((50, 70)) == [wire_a.net]
        assert controller.nets_at((500, 500)) == []

    def test_net_of_foreign_wire(self, controller):
        assert controller.net(make_wire((0, 0), (1, 0))) is None


class TestHighlight:
    def _named_nets(self, controller, *names):
        nets = []
        for i, name in enumerate(names):
            wire = make_wire((0, i * 100), (50, i * 100))
            controller.add_wire(wire)
            controller.set_net_name(wire.net, name)
            nets.append(wire.net)
        return nets

    def test_highlight_propagates_by_name(self, controller, events):
        vcc, vcc_lower, gnd = self._named_nets(controller, "VCC", "vcc", "GND")
        events.clear()
        controller.set_net_highlighted(vcc, True)
        assert vcc.highlighted and vcc_lower.highlighted
        assert not gnd.highlighted
        assert events.of("net_highlighted") == [(vcc, True), (vcc_lower, True)]

    def test_unhighlight_propagates(self, controller):
        vcc, vcc_lower = self._named_nets(controller, "VCC", "Vcc")
        vcc.set_highlighted(True)
        vcc_lower.set_highlighted(False)
        assert not vcc.highlighted

    def test_unnamed_nets_do_not_propagate(self, controller):
        first, second = self._named_nets(controller, "", "")
        controller.set_net_highlighted(first, True)
        assert not second.highlighted

    def test_nets_named(self, controller):
        vcc, vcc_lower, gnd = self._named_nets(controller, "VCC", "vcc", "GND")
        assert controller.nets_named(vcc) == [vcc, vcc_lower]
        assert controller.nets_named("gnd") == [gnd]
        assert controller.nets_named("") == []


class TestLifetime:
    def test_removed_item_kept_until_next_edit(self, controller):
        wire = make_wire((0, 0), (100, 0))
        controller.add_wire(wire)
        controller.remove_wire(wire)
        assert any(item is wire for item in controller._keep_alive)
        controller.add_node(make_node())
        assert controller._keep_alive == []

    @patch("schemnet.controllers.scene_controller.QTimer")
    @patch("schemnet.controllers.scene_controller.QCoreApplication")
    def test_release_is_scheduled_on_the_event_loop(self, mock_app, mock_timer):
        mock_app.instance.return_value = MagicMock()
        controller = SceneController()
        node = make_node()
        controller.add_node(node)
        controller.remove_node(node)
        mock_timer.singleShot.assert_called_once_with(0, controller._release_kept_alive)
        assert controller._keep_alive == [node]
        controller._release_kept_alive()
        assert controller._keep_alive == []


class TestClear:
    def test_clear_empties_scene(self, junction_scene):
        controller, wire_a, wire_b = junction_scene
        log = EventLog()
        controller.add_observer(log)
        controller.add_node(make_node())
        controller.clear()
        assert controller.nodes() == []
        assert controller.nets() == []
        assert log.names()[-1] == "scene_cleared"
        assert not controller.is_dirty()

    def test_default_scene_rect(self, controller):
        assert controller.scene_rect == (-500, -500, 1000, 1000)
