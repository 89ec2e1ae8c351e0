import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    product_name = django_filters.CharFilter(field_name="product_name", lookup_expr="icontains")
    sku = django_filters.CharFilter(field_name="sku", lookup_expr="iexact")
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    format = django_filters.CharFilter(field_name="format", lookup_expr="iexact")
    active = django_filters.BooleanFilter(field_name="active")

    class Meta:
        model = Product
        fields = ["product_name", "sku", "status", "format", "active"]
