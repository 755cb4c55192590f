"""
Collections de documents.

Une collection est un ensemble d'enregistrements sans schéma
(des dicts) accessible par quatre primitives :

    find_all / insert_one / update_one / delete_one

C'est l'abstraction sur la couche de persistance : le gateway
ne connaît que cette interface, jamais le moteur concret.

L'implémentation concrète s'appuie sur SQLAlchemy Core : une table
par collection, avec le document complet dans une colonne JSON
et une copie indexée de son champ clé.
"""

from __future__ import annotations

import abc
import logging
from typing import Any

from sqlalchemy import (
    JSON,
    Column,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

Document = dict[str, Any]
Filter = dict[str, Any]


class PersistenceUnavailable(Exception):
    """Levée quand la base de documents ne peut pas être atteinte."""
    pass


# --- Définition des tables ---

metadata = MetaData()


def _document_table(name: str) -> Table:
    return Table(
        name,
        metadata,
        # L'id auto-incrémenté conserve l'ordre d'insertion
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("doc_key", String(255), index=True),
        Column("document", JSON, nullable=False),
    )


products = _document_table("products")
suppliers = _document_table("suppliers")
orders = _document_table("orders")
sell_orders = _document_table("sell_orders")

# Champ du document servant de clé dans chaque collection
KEY_FIELDS: dict[str, str] = {
    "products": "sku",
    "suppliers": "id",
    "orders": "orderId",
    "sell_orders": "sellOrderId",
}


def matches(document: Document, filter_: Filter) -> bool:
    """Égalité exacte sur chaque champ du filtre."""
    return all(document.get(field) == value for field, value in filter_.items())


class AbstractCollection(abc.ABC):
    """
    Interface abstraite d'une collection de documents.

    Les insertions ne vérifient jamais les collisions de clé.
    update_one et delete_one ciblent le premier document
    correspondant au filtre et retournent True s'il existait.
    """

    name: str

    @abc.abstractmethod
    def find_all(self) -> list[Document]:
        raise NotImplementedError

    @abc.abstractmethod
    def insert_one(self, document: Document) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def update_one(self, filter_: Filter, fields: Document) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def delete_one(self, filter_: Filter) -> bool:
        raise NotImplementedError


class SqlAlchemyCollection(AbstractCollection):
    """Implémentation concrète de la collection avec SQLAlchemy Core."""

    def __init__(self, engine: Engine, table: Table):
        self.engine = engine
        self.table = table
        self.name = table.name
        self.key_field = KEY_FIELDS[table.name]

    def find_all(self) -> list[Document]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(self.table.c.document).order_by(self.table.c.id)
            )
            return [dict(row.document) for row in rows]

    def insert_one(self, document: Document) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                insert(self.table).values(
                    doc_key=self._key_of(document), document=document
                )
            )

    def update_one(self, filter_: Filter, fields: Document) -> bool:
        with self.engine.begin() as conn:
            row = self._first_match(conn, filter_)
            if row is None:
                return False
            document = {**row.document, **fields}
            conn.execute(
                update(self.table)
                .where(self.table.c.id == row.id)
                .values(doc_key=self._key_of(document), document=document)
            )
            return True

    def delete_one(self, filter_: Filter) -> bool:
        with self.engine.begin() as conn:
            row = self._first_match(conn, filter_)
            if row is None:
                return False
            conn.execute(delete(self.table).where(self.table.c.id == row.id))
            return True

    def _key_of(self, document: Document) -> str | None:
        value = document.get(self.key_field)
        return None if value is None else str(value)

    def _first_match(self, conn, filter_: Filter):
        """
        Premier document (ordre d'insertion) correspondant au filtre.

        Si le filtre porte sur le champ clé, la colonne indexée
        restreint la recherche ; l'égalité exacte est ensuite
        vérifiée sur le document lui-même.
        """
        query = select(self.table.c.id, self.table.c.document).order_by(
            self.table.c.id
        )
        if self.key_field in filter_:
            query = query.where(
                self.table.c.doc_key == str(filter_[self.key_field])
            )
        rows = conn.execute(query).all()
        return next((row for row in rows if matches(row.document, filter_)), None)


def connect(url: str) -> Engine:
    """
    Ouvre la base de documents et crée les tables manquantes.

    Lève PersistenceUnavailable si la base ne répond pas, ou si le
    pilote de l'URL n'est pas installé : c'est au composition root
    de décider quoi en faire.
    """
    try:
        engine = create_engine(url)
        metadata.create_all(engine)
    except (SQLAlchemyError, ImportError) as e:
        raise PersistenceUnavailable(str(e)) from e
    logger.debug("Base de documents ouverte : %s", engine.url)
    return engine


def sqlalchemy_collections(engine: Engine) -> dict[str, SqlAlchemyCollection]:
    """Les quatre collections de l'inventaire, indexées par nom."""
    return {
        table.name: SqlAlchemyCollection(engine, table)
        for table in (products, suppliers, orders, sell_orders)
    }
