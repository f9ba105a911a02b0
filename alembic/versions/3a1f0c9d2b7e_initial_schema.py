"""initial schema: menu, orders and order items

Revision ID: 3a1f0c9d2b7e
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3a1f0c9d2b7e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'restaurants',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sa.VARCHAR(length=255), nullable=True),
        sa.Column('logo_url', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('about', sa.TEXT(), nullable=True),
        sa.Column('hidden', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'categories',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('restaurant_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_categories_restaurant_id'), 'categories', ['restaurant_id'], unique=False)

    op.create_table(
        'meals',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('restaurant_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('category_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sa.TEXT(), nullable=True),
        sa.Column('dietary_category', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('availability_status', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('side_choices', _json(), nullable=True),
        sa.Column('extra_choices', _json(), nullable=True),
        sa.Column('allowed_sides', sa.Integer(), nullable=True),
        sa.Column('allowed_extras', sa.Integer(), nullable=True),
        sa.Column('preferences', _json(), nullable=True),
        sa.Column('preference_options', _json(), nullable=True),
        sa.Column('pairings_drinks', _json(), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_meals_restaurant_id'), 'meals', ['restaurant_id'], unique=False)

    op.create_table(
        'drinks',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('restaurant_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('category_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sa.TEXT(), nullable=True),
        sa.Column('availability_status', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('pricing', _json(), nullable=True),
        sa.Column('pairings_meals', _json(), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_drinks_restaurant_id'), 'drinks', ['restaurant_id'], unique=False)

    op.create_table(
        'specials',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('restaurant_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sa.TEXT(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_specials_restaurant_id'), 'specials', ['restaurant_id'], unique=False)

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('table_number', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('diner_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'READY', 'COMPLETED', name='orderstatus'), nullable=False),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('bill_requested', sa.Boolean(), nullable=False),
        sa.Column('waiter_called', sa.Boolean(), nullable=False),
        sa.Column('table_closed', sa.Boolean(), nullable=False),
        sa.Column('waiter_name', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('service_time_minutes', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_orders_restaurant_id'), 'orders', ['restaurant_id'], unique=False)
    op.create_index(op.f('ix_orders_table_number'), 'orders', ['table_number'], unique=False)

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('item_type', sa.Enum('MEAL', 'DRINK', name='itemtype'), nullable=False),
        sa.Column('item_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('item_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('variant', sa.Enum('GLASS', 'JUG', 'SHOT', 'BOTTLE', name='drinkvariant'), nullable=True),
        sa.Column('side_ids', _json(), nullable=True),
        sa.Column('extra_ids', _json(), nullable=True),
        sa.Column('preferences', _json(), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_order_items_order_id'), 'order_items', ['order_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_order_items_order_id'), table_name='order_items')
    op.drop_table('order_items')
    op.drop_index(op.f('ix_orders_table_number'), table_name='orders')
    op.drop_index(op.f('ix_orders_restaurant_id'), table_name='orders')
    op.drop_table('orders')
    op.drop_index(op.f('ix_specials_restaurant_id'), table_name='specials')
    op.drop_table('specials')
    op.drop_index(op.f('ix_drinks_restaurant_id'), table_name='drinks')
    op.drop_table('drinks')
    op.drop_index(op.f('ix_meals_restaurant_id'), table_name='meals')
    op.drop_table('meals')
    op.drop_index(op.f('ix_categories_restaurant_id'), table_name='categories')
    op.drop_table('categories')
    op.drop_table('restaurants')
    sa.Enum(name='drinkvariant').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='itemtype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='orderstatus').drop(op.get_bind(), checkfirst=True)
