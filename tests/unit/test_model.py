"""
Tests unitaires du modèle de domaine.

Le modèle n'a presque pas de comportement : on vérifie surtout
l'immuabilité des commandes.
"""

import dataclasses
from datetime import date
from decimal import Decimal

import pytest

from inventory.domain.model import Order, OrderItem, Product, SellOrder, Supplier


class TestProduct:
    def test_produit_mutable(self):
        produit = Product("LAMPE-DESIGN", "Lampe", "", 4, Decimal("12.50"))
        produit.quantity = 3
        assert produit.quantity == 3


class TestCommandes:
    def test_les_lignes_sont_stockées_dans_un_tuple(self):
        commande = Order("CMD-001", "FOURN-001", [OrderItem("LAMPE-DESIGN", 2)])
        assert commande.items == (OrderItem("LAMPE-DESIGN", 2),)

    def test_commande_de_vente_immuable(self):
        vente = SellOrder("VTE-001", "Alice", [OrderItem("LAMPE-DESIGN", 2)])
        with pytest.raises(dataclasses.FrozenInstanceError):
            vente.customer_name = "Bob"

    def test_date_du_jour_par_défaut(self):
        assert Order("CMD-001", "FOURN-001").order_date == date.today()

    def test_fournisseur_égalité_par_valeur(self):
        assert Supplier("FOURN-001", "Bois & Cie") == Supplier("FOURN-001", "Bois & Cie", "")
