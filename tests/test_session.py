"""
Tests for Session wiring and SessionSupervisor reconnects
"""

import asyncio
import random

from pyafk.config import BotConfig
from pyafk.core.auth import AuthState
from pyafk.core.movement import OWNER_POSITION, OWNER_WANDER
from pyafk.core.session import SessionSupervisor, SessionState
from pyafk.exceptions import WorldConnectionError
from pyafk.session.events import EventType
from pyafk.testing import ServerScenario, SimulatedConnection
from pyafk.world import MoveToExact, Vec3


class RecordingFactory:
    """Connection factory that remembers every connection and when it was made"""

    def __init__(self, scenario_builder=ServerScenario):
        self.scenario_builder = scenario_builder
        self.connections = []
        self.created_at = []

    def __call__(self, config):
        connection = SimulatedConnection(self.scenario_builder())
        self.connections.append(connection)
        self.created_at.append(asyncio.get_running_loop().time())
        return connection

    @property
    def last(self):
        return self.connections[-1]


def make_config(**utils):
    return BotConfig.from_dict({'utils': utils})


def slow_wander():
    return {'enabled': True, 'radius': 8, 'minDelaySeconds': 60,
            'maxDelaySeconds': 60, 'wanderTimeoutSeconds': 60}


def all_listeners(connection):
    return sum(connection.events.listener_count(event_type) for event_type in EventType)


class TestReconnect:
    """Test the supervisor's reconnect policy"""

    def test_single_reconnect_after_delay(self):
        """Test one reconnect after the delay despite duplicate ends"""
        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 50}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            supervisor.start()
            first = factory.last
            first.spawn()

            loop = asyncio.get_running_loop()
            ended_at = loop.time()
            first.end("socketClosed")
            first.end("socketClosed")  # noisy transport
            await asyncio.sleep(0.2)
            supervisor.stop()
            return factory, supervisor, ended_at

        factory, supervisor, ended_at = asyncio.run(scenario())

        assert len(factory.connections) == 2
        assert supervisor.reconnects_scheduled == 1
        assert factory.created_at[1] - ended_at >= 0.05 - 0.005

    def test_no_reconnect_when_disabled(self):
        """Test the supervisor closes when reconnect is off"""
        async def scenario():
            factory = RecordingFactory()
            supervisor = SessionSupervisor(make_config(), factory)
            supervisor.start()
            factory.last.spawn()
            factory.last.end("socketClosed")
            await asyncio.wait_for(supervisor.wait_closed(), timeout=1.0)
            return factory, supervisor

        factory, supervisor = asyncio.run(scenario())

        assert len(factory.connections) == 1
        assert supervisor.closed
        assert not supervisor.reconnect_pending

    def test_kick_and_error_do_not_reconnect(self):
        """Test kick and error events do not reconnect"""
        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 10}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            supervisor.start()
            factory.last.spawn()
            factory.last.kick("Flying is not enabled")
            factory.last.fail(RuntimeError("bad packet"))
            await asyncio.sleep(0.05)
            supervisor.stop()
            return factory, supervisor

        factory, supervisor = asyncio.run(scenario())

        assert len(factory.connections) == 1
        assert supervisor.reconnects_scheduled == 0

    def test_connect_failure_schedules_reconnect(self):
        """Test a refused connect is retried"""
        def refusing():
            scenario = ServerScenario("down")
            scenario.fail_connect = True
            return scenario

        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 20}})
            factory = RecordingFactory(refusing)
            supervisor = SessionSupervisor(config, factory)
            supervisor.start()
            await asyncio.sleep(0.07)
            supervisor.stop()
            return factory

        factory = asyncio.run(scenario())

        assert len(factory.connections) >= 2
        assert factory.connections[0].connect_count == 1

    def test_factory_failure_schedules_reconnect(self):
        """Test a factory WorldConnectionError is retried"""
        calls = []

        def factory(config):
            calls.append(config)
            if len(calls) == 1:
                raise WorldConnectionError("resolver down")
            return SimulatedConnection()

        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 10}})
            supervisor = SessionSupervisor(config, factory)
            first = supervisor.start()
            await asyncio.sleep(0.05)
            session = supervisor.session
            supervisor.stop()
            return first, session

        first, session = asyncio.run(scenario())

        assert first is None
        assert len(calls) == 2
        assert session is not None

    def test_stop_cancels_pending_reconnect(self):
        """Test stop cancels a pending reconnect"""
        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 30}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            supervisor.start()
            factory.last.end("socketClosed")
            pending = supervisor.reconnect_pending
            supervisor.stop()
            await asyncio.sleep(0.08)
            return pending, factory, supervisor

        pending, factory, supervisor = asyncio.run(scenario())

        assert pending
        assert not supervisor.reconnect_pending
        assert len(factory.connections) == 1
        assert supervisor.closed

    def test_stale_session_end_is_ignored(self):
        """Test ends from an old session are ignored"""
        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 10}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            old = supervisor.start()
            factory.last.end("socketClosed")
            await asyncio.sleep(0.03)
            old._on_end_callback(old, "late duplicate")
            await asyncio.sleep(0.03)
            supervisor.stop()
            return factory, supervisor

        factory, supervisor = asyncio.run(scenario())

        assert len(factory.connections) == 2
        assert supervisor.reconnects_scheduled == 1


class TestSessionTeardown:
    """Test that an ended session leaves nothing behind"""

    def test_end_stops_wander_and_listeners(self):
        """Test session end stops wander and drops every listener"""
        async def scenario():
            factory = RecordingFactory()
            supervisor = SessionSupervisor(make_config(**{'mob-movement': slow_wander()}), factory)
            session = supervisor.start()
            connection = factory.last
            connection.spawn()
            wander = session.wander
            running_timers = len(wander.timers)
            connection.end("socketClosed")
            return session, wander, running_timers, connection

        session, wander, running_timers, connection = asyncio.run(scenario())

        assert running_timers >= 2
        assert session.state == SessionState.ENDED
        assert not wander.running
        assert len(wander.timers) == 0
        assert all_listeners(connection) == 0

    def test_end_mid_handshake_removes_chat_listener(self):
        """Test session end during auth removes the chat listener"""
        async def scenario():
            config = make_config(**{'auto-auth': {'enabled': True, 'password': 'pw123'}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            session = supervisor.start()
            connection = factory.last
            connection.spawn()
            await asyncio.sleep(0)
            waiting = session.auth.pending
            connection.end("socketClosed")
            await asyncio.sleep(0)
            return session, waiting, connection

        session, waiting, connection = asyncio.run(scenario())

        assert waiting
        assert not session.auth.pending
        assert session.auth_task.done()
        assert connection.events.listener_count(EventType.CHAT_MESSAGE) == 0

    def test_respawn_does_not_restart_behaviours(self):
        """Test respawning after death starts nothing new"""
        async def scenario():
            config = make_config(**{'mob-movement': slow_wander()})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            session = supervisor.start()
            connection = factory.last
            connection.spawn()
            wander = session.wander
            connection.die()
            result = (session.wander is wander, wander.picks,
                      connection.events.listener_count(EventType.GOAL_REACHED))
            supervisor.stop()
            return result

        same_wander, picks, goal_listeners = asyncio.run(scenario())

        assert same_wander
        assert picks == 1
        # session listener plus wander listener
        assert goal_listeners == 2


class TestSpawnBehaviours:
    """Test what a session starts when the bot spawns"""

    def test_auth_success(self):
        """Test auto-auth registers and logs in"""
        async def scenario():
            config = make_config(**{'auto-auth': {'enabled': True, 'password': 'pw123'}})
            factory = RecordingFactory(ServerScenario.auth_server)
            supervisor = SessionSupervisor(config, factory)
            session = supervisor.start()
            factory.last.spawn()
            await session.auth_task
            supervisor.stop()
            return session, factory.last

        session, connection = asyncio.run(scenario())

        assert session.auth.state == AuthState.AUTHENTICATED
        assert connection.commands_sent == ["/register pw123 pw123", "/login pw123"]

    def test_auth_failure_skips_login(self):
        """Test a register failure is logged and login skipped"""
        def rejecting():
            return ServerScenario().add_reply("/register", "Invalid command.")

        async def scenario():
            config = make_config(**{'auto-auth': {'enabled': True, 'password': 'pw123'}})
            factory = RecordingFactory(rejecting)
            supervisor = SessionSupervisor(config, factory)
            session = supervisor.start()
            factory.last.spawn()
            await session.auth_task
            supervisor.stop()
            return session, factory.last

        session, connection = asyncio.run(scenario())

        assert session.auth.state == AuthState.FAILED
        assert session.auth.failure_reason == "Invalid command"
        assert connection.commands_sent == ["/register pw123 pw123"]
        assert session.auth_task.exception() is None

    def test_position_goal(self):
        """Test the fixed position goal is set and released on arrival"""
        async def scenario():
            config = BotConfig.from_dict({'position': {'enabled': True, 'x': 12, 'y': 70, 'z': -3}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            session = supervisor.start()
            factory.last.spawn()
            result = (factory.last.planner.goal, session.arbiter.owner,
                      factory.last.planner.movement_profile)
            factory.last.reach_goal()
            result += (session.arbiter.owner, factory.last.position)
            supervisor.stop()
            return result

        goal, owner, profile, owner_after, position = asyncio.run(scenario())

        assert goal == MoveToExact(12, 70, -3)
        assert owner == OWNER_POSITION
        assert profile is not None
        assert owner_after is None
        assert position == Vec3(12, 70, -3)

    def test_wander_supersedes_position_goal(self):
        """Test wander takes over the position goal"""
        async def scenario():
            config = BotConfig.from_dict({
                'position': {'enabled': True, 'x': 12, 'y': 70, 'z': -3},
                'utils': {'mob-movement': slow_wander()},
            })
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            session = supervisor.start()
            factory.last.spawn()
            result = (session.arbiter.owner, session.arbiter.takeovers)
            supervisor.stop()
            return result

        owner, takeovers = asyncio.run(scenario())

        assert owner == OWNER_WANDER
        assert takeovers == 1

    def test_anti_afk_jump(self):
        """Test anti-afk holds jump"""
        async def scenario():
            factory = RecordingFactory()
            supervisor = SessionSupervisor(make_config(**{'anti-afk': {'enabled': True}}), factory)
            supervisor.start()
            factory.last.spawn()
            controls = factory.last.active_controls
            supervisor.stop()
            return controls

        assert asyncio.run(scenario()) == ['jump']

    def test_anti_afk_jump_and_sneak(self):
        """Test anti-afk holds jump and sneak"""
        async def scenario():
            config = make_config(**{'anti-afk': {'enabled': True, 'sneak': True}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            supervisor.start()
            factory.last.spawn()
            controls = factory.last.active_controls
            supervisor.stop()
            return controls

        assert asyncio.run(scenario()) == ['jump', 'sneak']

    def test_chat_messages_sent_once(self):
        """Test scripted chat is sent on spawn"""
        async def scenario():
            config = make_config(**{'chat-messages': {'enabled': True, 'messages': ['hi', 'brb']}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            supervisor.start()
            factory.last.spawn()
            sent = list(factory.last.sent_chat)
            supervisor.stop()
            return sent

        assert asyncio.run(scenario()) == ['hi', 'brb']

    def test_nothing_enabled_does_nothing(self):
        """Test a default config only spawns"""
        async def scenario():
            factory = RecordingFactory()
            supervisor = SessionSupervisor(make_config(), factory)
            session = supervisor.start()
            factory.last.spawn()
            result = (session.state, factory.last.sent_chat,
                      factory.last.planner.goal_history, factory.last.active_controls)
            supervisor.stop()
            return result

        state, chat, goals, controls = asyncio.run(scenario())

        assert state == SessionState.SPAWNED
        assert chat == []
        assert goals == []
        assert controls == []

    def test_seeded_wander_is_reproducible(self):
        """Test the same seed gives the same first target"""
        async def run_once():
            factory = RecordingFactory()
            config = make_config(**{'mob-movement': slow_wander()})
            supervisor = SessionSupervisor(config, factory, rng=random.Random(3))
            session = supervisor.start()
            factory.last.spawn()
            target = session.wander.target
            supervisor.stop()
            return target.x, target.z

        assert asyncio.run(run_once()) == asyncio.run(run_once())


class TestFailureRecovery:
    """Test that failures outside the happy path never stall the bot"""

    def test_factory_os_error_keeps_reconnecting(self):
        """Test a factory raising ConnectionRefusedError still schedules the next attempt"""
        calls = []

        def factory(config):
            calls.append(config)
            if len(calls) == 2:
                raise ConnectionRefusedError(111, "Connection refused")
            return SimulatedConnection()

        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 10}})
            supervisor = SessionSupervisor(config, factory)
            supervisor.start()
            supervisor.session.connection.end("socketClosed")
            await asyncio.sleep(0.06)
            result = (len(calls), supervisor.session, supervisor.closed)
            supervisor.stop()
            return result

        call_count, session, closed = asyncio.run(scenario())

        assert call_count == 3
        assert session is not None
        assert not closed

    def test_factory_error_without_reconnect_closes(self):
        """Test a failing factory closes the supervisor when reconnect is off"""
        def factory(config):
            raise RuntimeError("bad plugin")

        async def scenario():
            supervisor = SessionSupervisor(make_config(), factory)
            supervisor.start()
            await asyncio.wait_for(supervisor.wait_closed(), timeout=1.0)
            return supervisor

        assert asyncio.run(scenario()).closed

    def test_connect_os_error_schedules_reconnect(self):
        """Test an OSError from connect() ends the session and reconnects"""
        connections = []

        def factory(config):
            connection = SimulatedConnection()
            if not connections:
                def refuse():
                    raise OSError("Network is unreachable")
                connection.connect = refuse
            connections.append(connection)
            return connection

        async def scenario():
            config = make_config(**{'auto-reconnect': {'enabled': True, 'delay': 10}})
            supervisor = SessionSupervisor(config, factory)
            first = supervisor.start()
            await asyncio.sleep(0.04)
            result = (first.state, len(connections), connections[-1].connected)
            supervisor.stop()
            return result

        first_state, count, connected = asyncio.run(scenario())

        assert first_state == SessionState.ENDED
        assert count == 2
        assert connected

    def test_rejected_wander_goal_at_spawn_keeps_other_behaviours(self):
        """Test a planner rejecting the first wander goal does not skip anti-afk"""
        async def scenario():
            config = make_config(**{'mob-movement': slow_wander(), 'anti-afk': {'enabled': True}})
            factory = RecordingFactory()
            supervisor = SessionSupervisor(config, factory)
            session = supervisor.start()
            connection = factory.last

            def reject(goal):
                raise WorldConnectionError("planner not ready")
            connection.planner.set_goal = reject

            connection.spawn()
            result = (connection.active_controls, session.wander.running,
                      session.wander.timers.is_armed('pick'))
            supervisor.stop()
            return result

        controls, running, pick_armed = asyncio.run(scenario())

        assert controls == ['jump']
        assert running
        assert pick_armed
