"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'response_analysis',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.String(length=64), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('analysis_batch_id', sa.String(length=64), nullable=True),
        sa.Column('geographic_region', sa.String(length=128), nullable=True),
        sa.Column('icp_vertical', sa.String(length=128), nullable=True),
        sa.Column('buyer_persona', sa.String(length=128), nullable=True),
        sa.Column('buying_journey_stage', sa.String(length=32), nullable=True),
        sa.Column('query_id', sa.Integer(), nullable=True),
        sa.Column('query_text', sa.Text(), nullable=True),
        sa.Column('answer_engine', sa.String(length=64), nullable=False),
        sa.Column('response_text', sa.Text(), nullable=True),
        sa.Column('sentiment_score', sa.Float(), nullable=True),
        sa.Column('ranking_position', sa.Integer(), nullable=True),
        sa.Column('company_mentioned', sa.Boolean(), nullable=True),
        sa.Column('recommended', sa.Boolean(), nullable=True),
        sa.Column('solution_analysis', sa.JSON(), nullable=True),
        sa.Column('rank_list', sa.Text(), nullable=True),
        sa.Column('citations_parsed', sa.JSON(), nullable=True),
        sa.Column('mentioned_companies', sa.JSON(), nullable=True),
        sa.Column('competitors_list', sa.JSON(), nullable=True),
    )
    op.create_index('ix_response_analysis_company_id', 'response_analysis', ['company_id'])
    op.create_index('ix_response_analysis_account_id', 'response_analysis', ['account_id'])
    op.create_index('ix_response_analysis_created_at', 'response_analysis', ['created_at'])
    op.create_index('ix_response_analysis_analysis_batch_id', 'response_analysis', ['analysis_batch_id'])
    op.create_index('ix_response_analysis_company_created', 'response_analysis', ['company_id', 'created_at'])
    op.create_index(
        'ix_response_analysis_company_region_vertical',
        'response_analysis',
        ['company_id', 'geographic_region', 'icp_vertical'],
    )

    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('account_id', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('industry', sa.String(length=255), nullable=True),
        sa.Column('number_of_employees', sa.Integer(), nullable=True),
        sa.Column('annual_revenue', sa.String(length=64), nullable=True),
        sa.Column('markets_operating_in', sa.JSON(), nullable=True),
        sa.Column('setup_completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_companies_account_id', 'companies', ['account_id'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('account_id', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
    )
    op.create_index('ix_products_company_id', 'products', ['company_id'])

    op.create_table(
        'competitors',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('account_id', sa.String(length=64), nullable=True),
        sa.Column('competitor_name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
    )
    op.create_index('ix_competitors_company_id', 'competitors', ['company_id'])

    op.create_table(
        'ideal_customer_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('account_id', sa.String(length=64), nullable=True),
        sa.Column('vertical', sa.String(length=255), nullable=False),
        sa.Column('company_size', sa.String(length=64), nullable=False),
        sa.Column('region', sa.String(length=128), nullable=False),
    )
    op.create_index('ix_ideal_customer_profiles_company_id', 'ideal_customer_profiles', ['company_id'])

    op.create_table(
        'personas',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'icp_id',
            sa.Integer(),
            sa.ForeignKey('ideal_customer_profiles.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('account_id', sa.String(length=64), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('seniority_level', sa.String(length=64), nullable=False),
        sa.Column('department', sa.String(length=128), nullable=False),
    )
    op.create_index('ix_personas_icp_id', 'personas', ['icp_id'])

    op.create_table(
        'wizard_sessions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('current_step', sa.String(length=32), nullable=False),
        sa.Column('draft_json', sa.Text(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_wizard_sessions_account_id', 'wizard_sessions', ['account_id'])


def downgrade() -> None:
    op.drop_index('ix_wizard_sessions_account_id', table_name='wizard_sessions')
    op.drop_table('wizard_sessions')
    op.drop_index('ix_personas_icp_id', table_name='personas')
    op.drop_table('personas')
    op.drop_index('ix_ideal_customer_profiles_company_id', table_name='ideal_customer_profiles')
    op.drop_table('ideal_customer_profiles')
    op.drop_index('ix_competitors_company_id', table_name='competitors')
    op.drop_table('competitors')
    op.drop_index('ix_products_company_id', table_name='products')
    op.drop_table('products')
    op.drop_index('ix_companies_account_id', table_name='companies')
    op.drop_table('companies')
    op.drop_index('ix_response_analysis_company_region_vertical', table_name='response_analysis')
    op.drop_index('ix_response_analysis_company_created', table_name='response_analysis')
    op.drop_index('ix_response_analysis_analysis_batch_id', table_name='response_analysis')
    op.drop_index('ix_response_analysis_created_at', table_name='response_analysis')
    op.drop_index('ix_response_analysis_account_id', table_name='response_analysis')
    op.drop_index('ix_response_analysis_company_id', table_name='response_analysis')
    op.drop_table('response_analysis')
