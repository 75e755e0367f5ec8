from weather_api.extensions import db
from weather_api.models import DeletedReading, WeatherReading
from weather_api.services import identity


def test_register_login_lookup_logout(client):
    r = client.post('/auth/register', json={'email': 'a@x.com', 'password': 'p'})
    assert r.status_code == 201
    assert r.get_json()['user']['role'] == 'Teacher'

    r = client.post('/auth/register', json={'email': 'a@x.com', 'password': 'p'})
    assert r.status_code == 409

    r = client.post('/auth/login', json={'email': 'a@x.com', 'password': 'p'})
    assert r.status_code == 200
    token = r.get_json()['authenticationKey']
    assert token

    r = client.get(f'/users/key/{token}')
    assert r.status_code == 200
    assert r.get_json()['user']['email'] == 'a@x.com'

    r = client.post('/auth/logout', json={'authenticationKey': token})
    assert r.status_code == 200

    r = client.get(f'/users/key/{token}')
    assert r.status_code == 404


def test_login_rejects_bad_credentials(client):
    client.post('/auth/register', json={'email': 'a@x.com', 'password': 'p'})
    assert client.post('/auth/login', json={'email': 'a@x.com', 'password': 'x'}).status_code == 401
    assert client.post('/auth/login', json={'email': 'b@x.com', 'password': 'p'}).status_code == 401
    assert client.post('/auth/login', json={'email': 'a@x.com'}).status_code == 400


def test_logout_with_unknown_key(client):
    r = client.post('/auth/logout', json={'authenticationKey': 'nope'})
    assert r.status_code == 400


def test_key_lookup_validates_format(client):
    assert client.get('/users/key/not-a-uuid').status_code == 400


def test_user_management(client, teacher_headers):
    r = client.post('/users', json={'email': 's@x.com', 'password': 'p', 'role': 'Sensor'},
                    headers=teacher_headers)
    assert r.status_code == 201
    user_id = r.get_json()['user']['_id']
    assert 'password' not in r.get_json()['user']

    r = client.post('/users', json={'email': 's@x.com', 'password': 'p', 'role': 'Sensor'},
                    headers=teacher_headers)
    assert r.status_code == 409

    r = client.post('/users', json={'email': 'x@x.com', 'password': 'p'}, headers=teacher_headers)
    assert r.status_code == 400

    r = client.get(f'/users/{user_id}', headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['user']['role'] == 'Sensor'

    r = client.put(f'/users/{user_id}', json={'role': 'User'}, headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['user']['role'] == 'User'

    r = client.put(f'/users/{user_id}', json={'shoeSize': 9}, headers=teacher_headers)
    assert r.status_code == 400

    r = client.get('/users', headers=teacher_headers)
    assert r.status_code == 200
    assert len(r.get_json()['usersData']) == 2

    assert client.get('/users/123', headers=teacher_headers).status_code == 400
    assert client.get('/users/' + '0' * 24, headers=teacher_headers).status_code == 404

    r = client.delete(f'/users/{user_id}', headers=teacher_headers)
    assert r.status_code == 200
    assert client.get(f'/users/{user_id}', headers=teacher_headers).status_code == 404


def test_user_date_range_routes(client, teacher_headers):
    identity.create_user('old@x.com', 'p', 'User',
                         created_at='2023-05-05T00:00:00Z', last_login='2023-05-06T00:00:00Z')

    r = client.patch('/users', json={'startDate': '20230501', 'endDate': '20230510'},
                     headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['matchedCount'] == 1
    assert r.get_json()['modifiedCount'] == 1

    r = client.patch('/users', json={'startDate': '2023-05-01', 'endDate': '20230510'},
                     headers=teacher_headers)
    assert r.status_code == 400

    identity.create_user('idle@x.com', 'p', 'User', last_login='2023-06-01T08:00:00Z')
    r = client.delete('/users/deleteManyByDateRange?startDate=20230601&endDate=20230601',
                      headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['deletedCount'] == 1


def test_create_reading_and_reject_invalid(client, sensor_headers):
    r = client.post('/weather', json={'deviceName': 'S1', 'temperature': 70}, headers=sensor_headers)
    assert r.status_code == 400
    assert WeatherReading.query.count() == 0

    r = client.post('/weather', json={'deviceName': 'S1', 'temperature': 21.5, 'humidity': 40},
                    headers=sensor_headers)
    assert r.status_code == 201
    data = r.get_json()['data']
    assert data['deviceName'] == 'S1'
    assert len(data['_id']) == 24


def test_reading_lifecycle(client, teacher_headers, user_headers):
    r = client.post('/weather', json={'deviceName': 'S1', 'temperature': 20,
                                      'readingDateTime': '2024-08-25T12:10:00Z'},
                    headers=teacher_headers)
    reading_id = r.get_json()['data']['_id']

    r = client.get(f'/weather/{reading_id}', headers=user_headers)
    assert r.status_code == 200
    assert r.get_json()['data']['temperature'] == 20

    assert client.get('/weather/nothex', headers=user_headers).status_code == 400
    assert client.get('/weather/' + 'f' * 24, headers=user_headers).status_code == 404

    r = client.put(f'/weather/{reading_id}', json={'temperature': 25}, headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['data']['temperature'] == 25

    r = client.patch(f'/weather/{reading_id}/precipitation', json={'precipitation': 1.2},
                     headers=teacher_headers)
    assert r.status_code == 200

    r = client.get('/weather/S1/2024-08-25T12:45:00', headers=user_headers)
    assert r.status_code == 200
    assert r.get_json()['data'][0]['precipitation'] == 1.2

    r = client.delete(f'/weather/{reading_id}', headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['logged'] is True
    assert client.get(f'/weather/{reading_id}', headers=user_headers).status_code == 404

    entry = DeletedReading.query.filter_by(original_id=reading_id).one()
    assert entry.deleted_by == 'teacher@example.com'


def test_bulk_ingest_and_pages(client, sensor_headers):
    batch = [{'temperature': t, 'readingDateTime': f'2024-01-0{t}T00:00:00Z'} for t in range(1, 8)]
    r = client.post('/weather/readings/S7', json=batch, headers=sensor_headers)
    assert r.status_code == 201
    assert r.get_json()['data']['insertedCount'] == 7

    assert client.post('/weather/readings/S7', json=[], headers=sensor_headers).status_code == 400

    # paginated reads are not gated
    r = client.get('/weather/page/1')
    assert r.status_code == 200
    assert [d['temperature'] for d in r.get_json()['weatherData']] == [6, 7]
    assert client.get('/weather/page/-1').status_code == 400


def test_malformed_ids_and_pages_are_rejected(client, teacher_headers, sensor_headers):
    r = client.post('/weather', json={'deviceName': 'S1', 'temperature': 20}, headers=teacher_headers)
    reading_id = r.get_json()['data']['_id']

    assert client.get(f'/weather/{reading_id}%0A', headers=teacher_headers).status_code == 400
    r = client.delete('/weather', json={'ids': [reading_id + '\n']}, headers=teacher_headers)
    assert r.status_code == 400
    assert WeatherReading.query.count() == 1

    assert client.get('/weather/page/%C2%B2').status_code == 400
    r = client.get('/weather/page/' + '9' * 25)
    assert r.status_code == 200
    assert r.get_json()['weatherData'] == []

    r = client.post('/weather', json={'deviceName': 'S1', 'humidity': float('nan')},
                    headers=sensor_headers)
    assert r.status_code == 400
    assert WeatherReading.query.count() == 1


def test_non_string_credentials_are_rejected(client, teacher_headers):
    r = client.post('/users', json={'email': 'z@x.com', 'password': 123, 'role': 'User'},
                    headers=teacher_headers)
    assert r.status_code == 400
    r = client.post('/users', json={'email': ['z@x.com'], 'password': 'p', 'role': 'User'},
                    headers=teacher_headers)
    assert r.status_code == 400
    r = client.post('/auth/register', json={'email': {'$gt': ''}, 'password': 'p'})
    assert r.status_code == 400
    r = client.post('/auth/login', json={'email': 'teacher@example.com', 'password': ['pass']})
    assert r.status_code == 400

    user_id = identity.get_by_email('teacher@example.com').id
    r = client.put(f'/users/{user_id}', json={'password': 42}, headers=teacher_headers)
    assert r.status_code == 400
    assert identity.login('teacher@example.com', 'pass').authentication_key


def test_bulk_update_and_delete(client, teacher_headers):
    ids = []
    for t in (1, 2, 3):
        r = client.post('/weather', json={'deviceName': 'S1', 'temperature': t}, headers=teacher_headers)
        ids.append(r.get_json()['data']['_id'])

    r = client.patch('/weather', json={'ids': ids[:2], 'updateData': {'humidity': 55}},
                     headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['matchedCount'] == 2

    r = client.patch('/weather', json={'ids': ['bad'], 'updateData': {'humidity': 55}},
                     headers=teacher_headers)
    assert r.status_code == 400

    r = client.delete('/weather', json={'ids': ids[:2]}, headers=teacher_headers)
    assert r.status_code == 200
    assert r.get_json()['deletedCount'] == 2

    r = client.delete('/weather', json={'ids': ids[:2]}, headers=teacher_headers)
    assert r.status_code == 404

    r = client.get('/weather', headers=teacher_headers)
    assert [d['_id'] for d in r.get_json()['data']] == [ids[2]]


def test_aggregation_routes(client, teacher_headers, user_headers):
    batch_a = [{'temperature': 10, 'precipitation': 2, 'readingDateTime': '2024-03-01T10:00:00Z'},
               {'temperature': 30, 'precipitation': 5, 'readingDateTime': '2024-03-02T10:00:00Z'}]
    batch_b = [{'temperature': 15, 'precipitation': 0, 'readingDateTime': '2024-03-31T23:30:00Z'}]
    client.post('/weather/readings/A', json=batch_a, headers=teacher_headers)
    client.post('/weather/readings/B', json=batch_b, headers=teacher_headers)

    r = client.get('/weather/max-temp/20240301/20240331', headers=user_headers)
    assert r.status_code == 200
    result = r.get_json()['result']
    assert [(x['deviceName'], x['temperature']) for x in result] == [('A', 30), ('B', 15)]

    assert client.get('/weather/max-temp/20250101/20250131', headers=user_headers).status_code == 404
    assert client.get('/weather/max-temp/2024-03-01/20240331', headers=user_headers).status_code == 400

    r = client.get('/weather/max-prep/A/2024-04-01', headers=user_headers)
    assert r.status_code == 200
    assert r.get_json()['data']['precipitation'] == 5

    assert client.get('/weather/max-prep/C/2024-04-01', headers=user_headers).status_code == 404


def test_delete_reports_log_failure(client, teacher_headers, monkeypatch):
    from weather_api.errors import StoreFailure

    r = client.post('/weather', json={'deviceName': 'S1', 'temperature': 5}, headers=teacher_headers)
    reading_id = r.get_json()['data']['_id']

    def failing_append(*args, **kwargs):
        raise StoreFailure('Failed to log deleted data')

    monkeypatch.setattr('weather_api.services.deletion_log.append_entry', failing_append)
    r = client.delete(f'/weather/{reading_id}', headers=teacher_headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body['deleted'] is True
    assert body['logged'] is False
    db.session.expire_all()
    assert WeatherReading.query.count() == 0


def test_unknown_route_is_json(client):
    r = client.get('/nowhere')
    assert r.status_code == 404
    assert r.get_json()['status'] == 404
