from conftest import TestConfig, place_target
from faxhunt.client_secret import get_client_secret
from faxhunt.models import GameStatus

OPERATOR = {'X-Secret': TestConfig.GAME_SECRET}


def test_index_reports_status(client, join):
    join('alice')
    res = client.get('/')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'active'
    assert data['winner'] is None
    assert data['players'] == 1


def test_join_returns_token_name_and_color(join, session):
    player = join('alice')
    assert player['username'] == 'alice'
    assert player['color'].startswith('#') and len(player['color']) == 7
    assert session.player_for_token(player['token']).name == 'alice'


def test_repeat_join_returns_existing_assignment(join, session):
    first = join('alice')
    second = join('alice')
    assert second['token'] == first['token']
    assert second['color'] == first['color']
    assert len(session.players) == 1


def test_join_rejects_bad_proof(client):
    res = client.post('/api/join', json={'clientId': 'alice', 'secret': 'WRONG123'})
    assert res.status_code == 401
    res = client.post('/api/join', json={'clientId': 'alice'})
    assert res.status_code == 400


def test_join_rejects_when_roster_full(client, join, session):
    session.max_players = 2
    join('alice')
    join('bob')
    res = client.post('/api/join', json={'clientId': 'cara', 'secret': get_client_secret('cara', 'foobar')})
    assert res.status_code == 403
    assert 'Max number of users' in res.get_json()['error']


def test_registered_player_can_rejoin_when_roster_full(client, join, session):
    session.max_players = 2
    alice = join('alice')
    join('bob')
    again = join('alice')
    assert again['token'] == alice['token']
    assert len(session.players) == 2


def test_join_rejects_non_object_body(client):
    res = client.post('/api/join', json=['alice', 'secret'])
    assert res.status_code == 400


def test_eleventh_join_in_window_is_rate_limited(client, join):
    for i in range(10):
        join(f"player{i}")
    res = client.post('/api/join', json={'clientId': 'late', 'secret': get_client_secret('late', 'foobar')})
    assert res.status_code == 429
    assert int(res.headers['Retry-After']) > 0
    assert res.get_json()['retryAfter'] > 0


def test_issue_secret(client, join):
    res = client.post('/api/secret', json={'secret': 'foobar', 'clientId': 'player1'})
    assert res.status_code == 200
    assert res.get_json() == {'clientId': 'player1', 'secret': '5YEBXWDR'}

    assert client.post('/api/secret', json={'secret': 'nope', 'clientId': 'x'}).status_code == 401
    assert client.post('/api/secret', json={'clientId': 'x'}).status_code == 400

    join('alice')
    res = client.post('/api/secret', json={'secret': 'foobar', 'clientId': 'alice'})
    assert res.status_code == 409


def test_fire_requires_valid_token(client, join):
    res = client.post('/api/fire', json={'x': 1, 'y': 1})
    assert res.status_code == 401
    res = client.post('/api/fire', json={'x': 1, 'y': 1}, headers={'Authorization': 'Bearer'})
    assert res.status_code == 400
    res = client.post('/api/fire', json={'x': 1, 'y': 1}, headers={'Authorization': 'Bearer not-a-token'})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid token'


def test_fire_rejects_bad_coordinates(client, join, clock):
    alice = join('alice')
    for body in ({'x': 10}, {'x': 'a', 'y': 2}, {'x': -1, 'y': 2}, {'x': 10, 'y': 601}, {'x': True, 'y': 3}):
        res = client.post('/api/fire', json=body, headers=alice['headers'])
        assert res.status_code == 400
        assert res.get_json()['error'] == 'Invalid shot coordinates'
        clock.advance(2.0)


def test_fire_rejects_integers_wider_than_a_float(client, join, session):
    alice = join('alice')
    res = client.post('/api/fire', json={'x': 10 ** 400, 'y': 10}, headers=alice['headers'])
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid shot coordinates'
    assert session.is_active


def test_hit_wins_and_ends_the_game(client, join, session):
    alice = join('alice')
    bob = join('bob')
    place_target(session, 400, 300)

    res = client.post('/api/fire', json={'x': 400, 'y': 300}, headers=alice['headers'])
    assert res.status_code == 200
    assert res.get_json() == {'message': 'Target hit! You won the game!', 'success': True, 'hit': True}
    assert session.status == GameStatus.ENDED
    assert session.winner == 'alice'

    res = client.post('/api/fire', json={'x': 400, 'y': 300}, headers=bob['headers'])
    assert res.status_code == 200
    data = res.get_json()
    assert data['success'] is False
    assert session.winner == 'alice'


def test_miss_keeps_game_active(client, join, session):
    alice = join('alice')
    place_target(session, 400, 300)
    res = client.post('/api/fire', json={'x': 100, 'y': 100}, headers=alice['headers'])
    assert res.get_json() == {'message': 'Missed the target', 'success': True, 'hit': False}
    assert session.status == GameStatus.ACTIVE


def test_fire_is_rate_limited_per_player(client, join, session, clock):
    alice = join('alice')
    bob = join('bob')
    place_target(session, 900, 500)

    assert client.post('/api/fire', json={'x': 10, 'y': 10}, headers=alice['headers']).status_code == 200
    res = client.post('/api/fire', json={'x': 10, 'y': 10}, headers=alice['headers'])
    assert res.status_code == 429
    assert res.headers['Retry-After'] == '2'
    # Other players have their own budget
    assert client.post('/api/fire', json={'x': 10, 'y': 10}, headers=bob['headers']).status_code == 200

    clock.advance(2.0)
    assert client.post('/api/fire', json={'x': 10, 'y': 10}, headers=alice['headers']).status_code == 200


def test_target_returns_noisy_position(client, join, session, clock):
    alice = join('alice')
    place_target(session, 500, 250)
    res = client.get('/api/target', headers=alice['headers'])
    assert res.status_code == 200
    pos = res.get_json()
    assert abs(pos['x'] - 500) <= 5
    assert abs(pos['y'] - 250) <= 5

    res = client.get('/api/target', headers=alice['headers'])
    assert res.status_code == 429
    assert res.headers['Retry-After'] == '1'

    clock.advance(1.0)
    assert client.get('/api/target', headers=alice['headers']).status_code == 200


def test_target_requires_token(client):
    assert client.get('/api/target').status_code == 401


def test_configure_requires_operator_secret(client, session):
    res = client.post('/api/configure', json={'speed': 80}, headers={'X-Secret': 'wrong'})
    assert res.status_code == 401
    assert client.post('/api/configure', json={'speed': 80}).status_code == 401
    assert session.motion.max_speed == TestConfig.MAX_SPEED


def test_configure_updates_speed_and_area(client, session):
    res = client.post('/api/configure', json={'speed': 80, 'area': 25}, headers=OPERATOR)
    assert res.status_code == 200
    assert res.get_json()['message'] == 'Configuration updated successfully'
    assert session.motion.max_speed == 80
    assert session.hit_radius == 25

    # Floors: speed never below the minimum, radius never below 10
    client.post('/api/configure', json={'speed': 5, 'area': 1}, headers=OPERATOR)
    assert session.motion.max_speed == session.motion.min_speed
    assert session.hit_radius == 10


def test_configure_rejects_invalid_values(client, session):
    res = client.post('/api/configure', json={'speed': 'fast', 'area': 30}, headers=OPERATOR)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid speed configuration'
    # Nothing was applied
    assert session.hit_radius == TestConfig.TARGET_AREA

    res = client.post('/api/configure', json={'area': [1]}, headers=OPERATOR)
    assert res.status_code == 400


def test_configure_rejects_integers_wider_than_a_float(client, session):
    res = client.post('/api/configure', json={'speed': 10 ** 400}, headers=OPERATOR)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid speed configuration'
    res = client.post('/api/configure', json={'area': -10 ** 400}, headers=OPERATOR)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid area configuration'
    assert session.motion.max_speed == TestConfig.MAX_SPEED
    assert session.hit_radius == TestConfig.TARGET_AREA


def test_operator_reset(client, join, session):
    alice = join('alice')
    place_target(session, 400, 300)
    client.post('/api/fire', json={'x': 400, 'y': 300}, headers=alice['headers'])
    assert session.status == GameStatus.ENDED

    assert client.post('/api/reset', headers={'X-Secret': 'nope'}).status_code == 401
    assert session.status == GameStatus.ENDED

    res = client.post('/api/reset', headers=OPERATOR)
    assert res.status_code == 200
    assert session.status == GameStatus.ACTIVE
    assert session.winner is None
    assert session.players == {}
    # Old tokens are gone with the roster
    res = client.post('/api/fire', json={'x': 1, 'y': 1}, headers=alice['headers'])
    assert res.status_code == 400


def test_scheduled_reset_after_win(client, join, session):
    alice = join('alice')
    bob = join('bob')
    place_target(session, 400, 300)
    client.post('/api/fire', json={'x': 400, 'y': 300}, headers=alice['headers'])
    assert len(session.scheduler.pending) == 1
    delay, _fn, _args = session.scheduler.pending[0]
    assert delay == TestConfig.AUTO_RESET_DELAY_SEC

    assert client.post('/api/fire', json={'x': 1, 'y': 1}, headers=bob['headers']).get_json()['success'] is False

    assert session.scheduler.run_pending() == 1
    assert session.status == GameStatus.ACTIVE
    assert session.winner is None
    assert session.players == {}
