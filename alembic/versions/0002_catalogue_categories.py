"""catalogue: categories table, product category/offer/updated_at

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 18:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_categories'),
    )
    op.create_index('ix_categories_id', 'categories', ['id'])
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    with op.batch_alter_table('products') as batch:
        batch.add_column(sa.Column('category_id', sa.Integer(), nullable=True))
        batch.add_column(sa.Column('offer_percentage', sa.Integer(), nullable=False, server_default='0'))
        batch.add_column(sa.Column('updated_at', sa.DateTime(), nullable=True))
        batch.alter_column('title', type_=sa.String(255), existing_nullable=False)
        batch.alter_column('slug', type_=sa.String(255), existing_nullable=False)
        batch.alter_column('image_url', type_=sa.String(500), existing_nullable=True)
        batch.create_foreign_key(
            'fk_products_category_id_categories', 'categories',
            ['category_id'], ['id'], ondelete='SET NULL',
        )
        batch.create_index('ix_products_category_id', ['category_id'])


def downgrade() -> None:
    with op.batch_alter_table('products') as batch:
        batch.drop_index('ix_products_category_id')
        batch.drop_constraint('fk_products_category_id_categories', type_='foreignkey')
        batch.alter_column('image_url', type_=sa.String(), existing_nullable=True)
        batch.alter_column('slug', type_=sa.String(), existing_nullable=False)
        batch.alter_column('title', type_=sa.String(), existing_nullable=False)
        batch.drop_column('updated_at')
        batch.drop_column('offer_percentage')
        batch.drop_column('category_id')
    op.drop_index('ix_categories_slug', table_name='categories')
    op.drop_index('ix_categories_id', table_name='categories')
    op.drop_table('categories')
