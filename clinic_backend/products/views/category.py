# products/views/category.py

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import HasAnyCapability, CAP_INVENTORY_EDIT
from products.models import Category
from products.serializers.category import CategorySerializer


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API

    Policy:
    - Any authenticated user can READ categories (needed for product forms)
    - Only users with inventory edit capability can CREATE/UPDATE/DELETE categories
    - DELETE deactivates; products keep their category reference
    """

    queryset = Category.objects.all().order_by("name")
    serializer_class = CategorySerializer

    def get_permissions(self):
        # Allow all authenticated users to list/retrieve (dropdown needs this)
        if self.action in {"list", "retrieve"}:
            return [IsAuthenticated()]

        self.required_any_capabilities = {CAP_INVENTORY_EDIT}
        return [IsAuthenticated(), HasAnyCapability()]

    def destroy(self, request, *args, **kwargs):
        category = self.get_object()
        if category.is_active:
            category.is_active = False
            category.save(update_fields=["is_active"])
        return Response(status=status.HTTP_204_NO_CONTENT)
