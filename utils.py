JOB_FIELDS = ('title', 'description', 'company', 'location', 'salary', 'experience_required', 'skills')

# sqlite message / MySQL errno / PostgreSQL SQLSTATE
MYSQL_DUP_ENTRY = 1062
PG_UNIQUE_VIOLATION = '23505'


def job_fields_from_form(form):
    # taken verbatim; missing fields become None and the table constraints decide
    return {field: form.get(field) for field in JOB_FIELDS}


def search_pattern(term):
    escaped = term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'%{escaped}%'


def is_unique_violation(exc):
    orig = getattr(exc, 'orig', exc)
    if getattr(orig, 'pgcode', None) == PG_UNIQUE_VIOLATION:
        return True
    args = getattr(orig, 'args', ())
    if args and args[0] == MYSQL_DUP_ENTRY:
        return True
    text = str(orig)
    return 'UNIQUE constraint failed' in text or 'Duplicate entry' in text


def parse_id(value):
    # path segments arrive as text; anything non-numeric can never match a row
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
