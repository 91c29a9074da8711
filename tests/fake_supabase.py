# tests/fake_supabase.py
"""
In-memory stand-in for the Supabase PostgREST query builder.

Only the calls the services make are supported. Every `table()` call is
recorded in `requests`, so tests can assert that nothing reached the backend.
"""
import re
import uuid
from datetime import datetime, timezone


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, backend, name):
        self.backend = backend
        self.name = name
        self.action = 'select'
        self.columns = '*'
        self.payload = None
        self.filters = []
        self.ordering = None
        self.row_limit = None

    def select(self, columns='*'):
        self.columns = columns
        return self

    def insert(self, payload):
        self.action = 'insert'
        self.payload = payload
        return self

    def update(self, payload):
        self.action = 'update'
        self.payload = payload
        return self

    def delete(self):
        self.action = 'delete'
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def or_(self, expression):
        terms = re.findall(r'(\w+)\.ilike\."%(.*?)%"', expression)

        def matches(row):
            return any(term.lower() in str(row.get(column) or '').lower() for column, term in terms)

        self.filters.append(matches)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matching(self):
        return [row for row in self.backend.tables[self.name] if all(f(row) for f in self.filters)]

    def _embed(self, row):
        result = dict(row)
        embed = re.search(r'measurements(?:![\w]+)?\(([^)]*)\)', self.columns)
        if embed and self.name == 'students':
            columns = [c.strip() for c in embed.group(1).split(',')]
            result['measurements'] = [
                {c: m.get(c) for c in columns}
                for m in self.backend.tables['measurements'] if m['student_id'] == row['id']
            ]
        return result

    def execute(self):
        if self.backend.error:
            raise self.backend.error

        table = self.backend.tables[self.name]

        if self.action == 'insert':
            row = dict(self.payload)
            row.setdefault('id', str(uuid.uuid4()))
            row.setdefault('created_at', datetime.now(timezone.utc).isoformat())
            table.append(row)
            return FakeResponse([dict(row)])

        rows = self._matching()

        if self.action == 'update':
            for row in rows:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in rows])

        if self.action == 'delete':
            ids = {row['id'] for row in rows}
            self.backend.tables[self.name] = [row for row in table if row['id'] not in ids]
            if self.name == 'students':
                # ON DELETE CASCADE
                self.backend.tables['measurements'] = [
                    m for m in self.backend.tables['measurements'] if m['student_id'] not in ids
                ]
            return FakeResponse([dict(row) for row in rows])

        if self.ordering:
            column, desc = self.ordering
            rows = sorted(rows, key=lambda r: r.get(column) or '', reverse=desc)
        if self.row_limit is not None:
            rows = rows[:self.row_limit]
        return FakeResponse([self._embed(row) for row in rows])


class FakeSupabase:
    def __init__(self):
        self.tables = {'students': [], 'measurements': []}
        self.requests = []
        self.error = None

    def table(self, session, name):
        self.requests.append((session.user_id, name))
        return FakeQuery(self, name)

    def add_student(self, user_id, name, email, created_at, date_of_birth='1990-05-20', **extra):
        row = {
            'id': str(uuid.uuid4()),
            'user_id': user_id,
            'name': name,
            'email': email,
            'phone': '11999990000',
            'date_of_birth': date_of_birth,
            'created_at': created_at,
            'updated_at': created_at,
        }
        row.update(extra)
        self.tables['students'].append(row)
        return row

    def add_measurement(self, student, measured_at, weight=80.0, height=180.0, body_fat_percentage=20.0, **extra):
        row = {
            'id': str(uuid.uuid4()),
            'student_id': student['id'],
            'user_id': student['user_id'],
            'weight': weight,
            'height': height,
            'body_fat_percentage': body_fat_percentage,
            'measured_at': measured_at,
            'created_at': measured_at,
            'notes': None,
        }
        row.update(extra)
        self.tables['measurements'].append(row)
        return row
