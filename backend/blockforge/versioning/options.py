from blockforge.extensions import db
from blockforge.models.option import Option


class SqlOptionRepository:
    """
    Option records stored in the ``options`` table.

    Writes are only added to the session; callers commit through
    ``transactional()`` so a multi-record save lands all at once.
    """

    def get(self, name, default=None):
        option = Option.query.filter_by(name=name).first()
        if option is None or option.value is None:
            return default
        return option.value

    def update(self, name, value):
        option = Option.query.filter_by(name=name).first()
        if option is None:
            option = Option(name=name)
            db.session.add(option)
        option.value = value
        db.session.flush()

    def delete(self, name):
        option = Option.query.filter_by(name=name).first()
        if option is not None:
            db.session.delete(option)
            db.session.flush()
